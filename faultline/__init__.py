"""
Centralized error classification, logging and user feedback.

Typical use::

    from faultline import ErrorHandler, UserFeedbackSystem

    handler = ErrorHandler()
    feedback = UserFeedbackSystem(handler)
    response = feedback.generate_error_response(exc, {"component": "summaries"})
"""

from faultline.config import Settings
from faultline.models import (
    ErrorRecord,
    ErrorSeverity,
    ErrorType,
    FeedbackResult,
    HandledError,
    RecoveryPlan,
    RecoveryStrategy,
)
from faultline.services import (
    ErrorHandler,
    ExportError,
    UserFeedbackSystem,
    create_error_handler,
)

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "ErrorType",
    "ErrorSeverity",
    "ErrorRecord",
    "RecoveryStrategy",
    "RecoveryPlan",
    "HandledError",
    "FeedbackResult",
    "ErrorHandler",
    "UserFeedbackSystem",
    "ExportError",
    "create_error_handler",
]
