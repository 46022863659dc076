"""Handler result and user feedback data models."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .error import ErrorSeverity, ErrorType
from .pattern import ErrorPattern
from .recovery import RecoveryPlan


class HandledError(BaseModel):
    """Structured result of running a failure through the pipeline."""

    type: ErrorType
    severity: ErrorSeverity
    message: str
    details: str
    suggestions: List[str] = []
    recovery_plan: RecoveryPlan
    pattern: Optional[ErrorPattern] = None
    error_id: str
    timestamp: datetime
    retryable: bool
    sanitized_context: Dict[str, Any] = {}


class ActionType(str, Enum):
    """Kind of action offered to the user."""

    RETRY = "retry"
    FALLBACK = "fallback"
    SUGGESTION = "suggestion"


class UserAction(BaseModel):
    """Actionable step shown to the user."""

    type: ActionType
    label: str
    description: str
    primary: bool = False
    delay_ms: Optional[int] = None


class UserMessage(BaseModel):
    """Human-facing title and description."""

    title: str
    description: str
    technical: Optional[Dict[str, Any]] = None


class SupportInfo(BaseModel):
    """Where the user can get help with an error."""

    error_id: str
    report_url: str
    contact_email: str
    status_page: str
    documentation: str


class FeedbackResult(BaseModel):
    """User-facing error response."""

    message: str
    type: ErrorType
    severity: ErrorSeverity
    user_message: UserMessage
    actions: List[UserAction] = []
    support: SupportInfo
    error_id: str
    timestamp: datetime
