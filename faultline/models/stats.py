"""Error statistics data models."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .error import ErrorSeverity, ErrorType


class TopError(BaseModel):
    """Error type ranked by occurrence count."""

    type: ErrorType
    count: int


class ErrorStats(BaseModel):
    """Aggregated counts over a trailing time window."""

    window: str = Field(..., description="Window as requested, e.g. '24h'")
    window_ms: int = Field(..., description="Parsed window length in milliseconds")
    total: int = 0
    by_type: Dict[str, int] = {}
    by_severity: Dict[str, int] = {}
    by_component: Dict[str, int] = {}
    top_errors: List[TopError] = []


class RecentError(BaseModel):
    """Short summary of a logged error."""

    id: str
    timestamp: datetime
    type: ErrorType
    severity: ErrorSeverity
    component: str
    retryable: bool


class SessionStats(BaseModel):
    """Error counts for a single session."""

    session_id: str
    total: int = 0
    by_type: Dict[str, int] = {}
    by_severity: Dict[str, int] = {}
    recent: List[RecentError] = []


class HealthState(str, Enum):
    """Overall health derived from recent errors."""

    HEALTHY = "healthy"
    WARNING = "warning"
    DEGRADED = "degraded"
    CRITICAL = "critical"


class HealthStatus(BaseModel):
    """Health summary over the last hour."""

    status: HealthState
    timestamp: datetime
    errors_last_hour: int
    critical_errors: int
    error_rate_per_minute: str
    top_error_types: List[TopError] = []


class ErrorCounter(BaseModel):
    """Occurrence counter for a type/component key."""

    count: int = 0
    last_occurrence: Optional[datetime] = None
