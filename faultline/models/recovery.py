"""Recovery plan data models."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel


class RecoveryStrategy(str, Enum):
    """How a caller should respond to a failure."""

    RETRY = "retry"
    FALLBACK = "fallback"
    GRACEFUL_DEGRADATION = "graceful_degradation"
    USER_ACTION_REQUIRED = "user_action_required"
    SYSTEM_INTERVENTION = "system_intervention"


class BackoffKind(str, Enum):
    """Delay growth between retry attempts."""

    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class RecoveryPlan(BaseModel):
    """
    Advisory recovery plan for a classified error.

    Only the fields relevant to ``strategy`` are populated. Delays are
    metadata for the caller; nothing here sleeps or retries.
    """

    strategy: RecoveryStrategy
    delay_ms: Optional[int] = None
    max_retries: Optional[int] = None
    backoff: Optional[BackoffKind] = None
    fallback_options: List[str] = []
    degradation_options: List[str] = []
    fallback_content: Optional[str] = None
    required_actions: List[str] = []
    validation_rules: List[Any] = []
    intervention_required: Optional[str] = None
    user_action: Optional[str] = None

    def next_delay_ms(self, attempt: int) -> Optional[int]:
        """
        Suggested delay before the given retry attempt.

        Args:
            attempt: Retry attempt number (1-based)

        Returns:
            Delay in milliseconds, or None if the plan carries no delay
        """
        if self.delay_ms is None:
            return None
        attempt = max(attempt, 1)
        if self.backoff == BackoffKind.EXPONENTIAL:
            return self.delay_ms * (2 ** (attempt - 1))
        if self.backoff == BackoffKind.LINEAR:
            return self.delay_ms * attempt
        return self.delay_ms
