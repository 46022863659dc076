"""Error pattern data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class PatternKind(str, Enum):
    """Kind of anomaly raised by pattern detection."""

    HIGH_FREQUENCY = "high_frequency"
    COMPONENT_SPECIFIC = "component_specific"


class ErrorPattern(BaseModel):
    """Anomaly signal for clustered failures."""

    kind: PatternKind
    description: str
    count: int
    window: Optional[str] = None
    recommendation: str
