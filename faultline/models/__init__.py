"""Data models for the faultline error pipeline."""

from .error import (
    ErrorClassification,
    ErrorMessageTemplate,
    ErrorRecord,
    ErrorSeverity,
    ErrorType,
    RawError,
)
from .feedback import (
    ActionType,
    FeedbackResult,
    HandledError,
    SupportInfo,
    UserAction,
    UserMessage,
)
from .pattern import ErrorPattern, PatternKind
from .recovery import BackoffKind, RecoveryPlan, RecoveryStrategy
from .stats import (
    ErrorCounter,
    ErrorStats,
    HealthState,
    HealthStatus,
    RecentError,
    SessionStats,
    TopError,
)

__all__ = [
    # Error models
    "ErrorType",
    "ErrorSeverity",
    "ErrorClassification",
    "ErrorMessageTemplate",
    "RawError",
    "ErrorRecord",
    # Recovery models
    "RecoveryStrategy",
    "BackoffKind",
    "RecoveryPlan",
    # Pattern models
    "PatternKind",
    "ErrorPattern",
    # Stats models
    "TopError",
    "ErrorStats",
    "RecentError",
    "SessionStats",
    "HealthState",
    "HealthStatus",
    "ErrorCounter",
    # Result models
    "HandledError",
    "ActionType",
    "UserAction",
    "UserMessage",
    "SupportInfo",
    "FeedbackResult",
]
