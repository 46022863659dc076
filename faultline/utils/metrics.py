"""
Error counters and metric emission for observability.

This module provides:
- Per type/component occurrence counters
- Last seen record per error type
- Metric emission through the structured logger
"""

from typing import Any, Dict, Optional

from faultline.models.error import ErrorRecord, ErrorType
from faultline.models.stats import ErrorCounter
from faultline.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorCounters:
    """
    Running counters derived from handled errors.

    Tracks:
    - Occurrences per "<TYPE>:<component>" key with last occurrence time
    - The most recent record for every error type

    Not synchronized on its own; callers hold the error log lock.
    """

    def __init__(self):
        self._counts: Dict[str, ErrorCounter] = {}
        self._last_errors: Dict[ErrorType, ErrorRecord] = {}

    @staticmethod
    def key_for(record: ErrorRecord) -> str:
        return f"{record.type.value}:{record.component}"

    def record(self, record: ErrorRecord) -> ErrorCounter:
        """
        Count an error occurrence.

        Args:
            record: Classified error record

        Returns:
            Updated counter for the record's type/component key
        """
        key = self.key_for(record)
        counter = self._counts.get(key)
        if counter is None:
            counter = ErrorCounter()
            self._counts[key] = counter

        counter.count += 1
        counter.last_occurrence = record.timestamp
        self._last_errors[record.type] = record
        return counter

    def last_error(self, error_type: ErrorType) -> Optional[ErrorRecord]:
        return self._last_errors.get(ErrorType(error_type))

    def snapshot(self) -> Dict[str, ErrorCounter]:
        """Copy of all counters keyed by "<TYPE>:<component>"."""
        return {key: counter.model_copy() for key, counter in self._counts.items()}

    def reset(self) -> None:
        self._counts.clear()
        self._last_errors.clear()

    def __len__(self) -> int:
        return len(self._counts)


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric (for future integration with monitoring systems).

    The metric is written to the structured log; a metrics backend can
    scrape it from there.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.debug(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
