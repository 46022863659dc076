"""Frequency-based anomaly detection over recent error history."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from faultline.models.error import ErrorRecord
from faultline.models.pattern import ErrorPattern, PatternKind


class PatternDetector:
    """
    Detects clusters of failures in the error log.

    Two checks run in order and at most one pattern is reported:
    high frequency of a type within a trailing window, then recurrence of
    a type within a component's recent errors.
    """

    def __init__(
        self,
        window: timedelta = timedelta(minutes=5),
        frequency_threshold: int = 5,
        component_lookback: int = 10,
        component_threshold: int = 3,
    ):
        """
        Initialize the detector.

        Args:
            window: Trailing window for the high-frequency check
            frequency_threshold: Same-type errors in the window that raise a pattern
            component_lookback: Recent errors of a component examined
            component_threshold: Same-type errors among those that raise a pattern
        """
        self.window = window
        self.frequency_threshold = frequency_threshold
        self.component_lookback = component_lookback
        self.component_threshold = component_threshold

    @property
    def window_label(self) -> str:
        minutes = int(self.window.total_seconds() // 60)
        if minutes * 60 == self.window.total_seconds():
            return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
        return f"{int(self.window.total_seconds())} seconds"

    def detect(
        self,
        record: ErrorRecord,
        entries: Sequence[ErrorRecord],
        now: Optional[datetime] = None,
    ) -> Optional[ErrorPattern]:
        """
        Check the log for a pattern involving the record.

        Args:
            record: Newly appended record
            entries: Log snapshot in insertion order, including the record
            now: Reference time (defaults to the current UTC time)

        Returns:
            ErrorPattern, or None when nothing stands out
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - self.window

        recent_same_type = sum(
            1 for entry in entries
            if entry.type == record.type and cutoff <= entry.timestamp <= now
        )
        if recent_same_type >= self.frequency_threshold:
            return ErrorPattern(
                kind=PatternKind.HIGH_FREQUENCY,
                description=f"{record.type.value} occurring frequently",
                count=recent_same_type,
                window=self.window_label,
                recommendation="investigate_root_cause",
            )

        component_entries = [entry for entry in entries if entry.component == record.component]
        component_entries = component_entries[-self.component_lookback:]
        same_type = sum(1 for entry in component_entries if entry.type == record.type)
        if same_type >= self.component_threshold:
            return ErrorPattern(
                kind=PatternKind.COMPONENT_SPECIFIC,
                description=f"Recurring {record.type.value} in {record.component}",
                count=same_type,
                recommendation="check_component_health",
            )

        return None
