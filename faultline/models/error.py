"""Error classification data models."""

import errno
import traceback
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


_FAILURE_ATTRS = ("status", "status_code", "code", "name", "message")


class ErrorType(str, Enum):
    """Category tag assigned to a failure by the classifier."""

    # API and network
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"

    # Validation and processing
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    CONTENT_ERROR = "CONTENT_ERROR"
    FORMAT_ERROR = "FORMAT_ERROR"

    # Storage and session
    DATABASE_ERROR = "DATABASE_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    SESSION_ERROR = "SESSION_ERROR"

    # Business logic
    TRANSCRIPT_ERROR = "TRANSCRIPT_ERROR"
    SUMMARY_ERROR = "SUMMARY_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    QUOTA_ERROR = "QUOTA_ERROR"

    # System
    SYSTEM_ERROR = "SYSTEM_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    DEPENDENCY_ERROR = "DEPENDENCY_ERROR"


class ErrorSeverity(str, Enum):
    """Impact tier of an error type."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorClassification(BaseModel):
    """Severity and retryability derived from an error type."""

    severity: ErrorSeverity
    retryable: bool


class ErrorMessageTemplate(BaseModel):
    """User-facing wording for an error type."""

    title: str
    details: str
    suggestions: List[str] = []


class RawError(BaseModel):
    """
    Normalized view of an incoming failure.

    Only the fields the classifier looks at are kept. Use ``coerce`` to
    build one from an exception, a mapping or a plain message.
    """

    status: Optional[int] = None
    code: Optional[str] = None
    name: Optional[str] = None
    message: Optional[str] = None
    stack: Optional[str] = None

    @classmethod
    def coerce(cls, value: Any) -> "RawError":
        """
        Build a RawError from whatever the caller handed in.

        Args:
            value: RawError, mapping, exception, object with failure
                attributes, string or None

        Returns:
            A new RawError; the input is left untouched
        """
        if isinstance(value, RawError):
            return value.model_copy()
        if isinstance(value, BaseException):
            return cls.from_exception(value)
        if isinstance(value, Mapping):
            return cls(
                status=_as_status(value.get("status", value.get("status_code"))),
                code=_as_str(value.get("code")),
                name=_as_str(value.get("name")),
                message=_as_str(value.get("message")),
                stack=_as_str(value.get("stack")),
            )
        if value is None:
            return cls()
        if not isinstance(value, str) and any(hasattr(value, field) for field in _FAILURE_ATTRS):
            return cls.from_object(value)
        return cls(message=str(value))

    @classmethod
    def from_object(cls, value: Any) -> "RawError":
        """Read failure fields from the attributes of a response-like object."""
        status = _as_status(getattr(value, "status", None))
        if status is None:
            status = _as_status(getattr(value, "status_code", None))
        return cls(
            status=status,
            code=_as_str(getattr(value, "code", None)),
            name=_as_str(getattr(value, "name", None)),
            message=_as_str(getattr(value, "message", None)),
            stack=_as_str(getattr(value, "stack", None)),
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> "RawError":
        """Extract status, code, name and message from an exception."""
        status = _as_status(getattr(exc, "status", None))
        if status is None:
            status = _as_status(getattr(exc, "status_code", None))

        code = getattr(exc, "code", None)
        if not isinstance(code, str):
            code = None
        if code is None:
            exc_errno = getattr(exc, "errno", None)
            if isinstance(exc_errno, int):
                code = errno.errorcode.get(exc_errno)
        if code is None and isinstance(exc, TimeoutError):
            code = "ETIMEDOUT"

        stack = None
        if exc.__traceback__ is not None:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        return cls(
            status=status,
            code=code,
            name=type(exc).__name__,
            message=str(exc) or None,
            stack=stack,
        )


class ErrorRecord(BaseModel):
    """Classified, sanitized record of a single failure."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique error identifier (err_ prefix)")
    timestamp: datetime = Field(..., description="UTC capture time")
    type: ErrorType
    severity: ErrorSeverity
    retryable: bool
    component: str = "unknown"
    operation: str = "unknown"
    user_id: str = "anonymous"
    session_id: Optional[str] = None
    transcript_id: Optional[str] = None
    message: str = "Unknown error"
    context: Dict[str, Any] = Field(default_factory=dict, description="Sanitized context")


def _as_status(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
