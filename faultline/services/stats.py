"""
Time-windowed statistics over the error log.

This module provides:
- parse_time_window for '<int><m|h|d>' strings
- StatsAggregator for windowed counts and top-N ranking
- Per-session statistics and an hourly health summary
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from faultline.models.error import ErrorRecord, ErrorSeverity
from faultline.models.stats import (
    ErrorStats,
    HealthState,
    HealthStatus,
    RecentError,
    SessionStats,
    TopError,
)


_WINDOW_PATTERN = re.compile(r"^(\d+)([mhd])$")
_UNIT_MS = {
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}

DEFAULT_WINDOW = "24h"
DEFAULT_WINDOW_MS = 24 * 60 * 60 * 1000
TOP_ERRORS_LIMIT = 5
RECENT_SESSION_ERRORS = 5

# Health thresholds for errors in the last hour
DEGRADED_THRESHOLD = 50
WARNING_THRESHOLD = 20


def parse_time_window(window: Optional[str]) -> int:
    """
    Parse a time window string to milliseconds.

    Args:
        window: Window such as '5m', '1h' or '7d'

    Returns:
        Window length in milliseconds; 24 hours if unparsable
    """
    if not isinstance(window, str):
        return DEFAULT_WINDOW_MS
    match = _WINDOW_PATTERN.match(window.strip())
    if not match:
        return DEFAULT_WINDOW_MS
    amount, unit = match.groups()
    return int(amount) * _UNIT_MS[unit]


def _count(counts: Dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


class StatsAggregator:
    """Computes statistics over snapshots of the error log."""

    def __init__(self, top_limit: int = TOP_ERRORS_LIMIT):
        self.top_limit = top_limit

    def compute(
        self,
        records: Sequence[ErrorRecord],
        window: str = DEFAULT_WINDOW,
        now: Optional[datetime] = None,
    ) -> ErrorStats:
        """
        Aggregate records whose timestamp falls in [now - window, now].

        Ranking of ``top_errors`` is by descending count; equal counts keep
        the order in which the types first appear in the window.

        Args:
            records: Log snapshot in insertion order
            window: Trailing window, e.g. '24h'
            now: Reference time (defaults to the current UTC time)

        Returns:
            ErrorStats for the window
        """
        now = now or datetime.now(timezone.utc)
        window_ms = parse_time_window(window)
        cutoff = now - timedelta(milliseconds=window_ms)

        by_type: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        by_component: Dict[str, int] = {}
        total = 0

        for record in records:
            if not cutoff <= record.timestamp <= now:
                continue
            total += 1
            _count(by_type, record.type.value)
            _count(by_severity, record.severity.value)
            _count(by_component, record.component)

        # sorted() is stable, so ties keep first-discovery order
        ranked = sorted(by_type.items(), key=lambda item: item[1], reverse=True)
        top_errors = [
            TopError(type=error_type, count=count)
            for error_type, count in ranked[:self.top_limit]
        ]

        return ErrorStats(
            window=window if isinstance(window, str) else DEFAULT_WINDOW,
            window_ms=window_ms,
            total=total,
            by_type=by_type,
            by_severity=by_severity,
            by_component=by_component,
            top_errors=top_errors,
        )

    def session_stats(self, records: Sequence[ErrorRecord], session_id: str) -> SessionStats:
        """
        Counts for the errors of one session.

        Args:
            records: Log snapshot in insertion order
            session_id: Session to report on

        Returns:
            SessionStats including the session's most recent errors
        """
        session_records: List[ErrorRecord] = [r for r in records if r.session_id == session_id]

        by_type: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        for record in session_records:
            _count(by_type, record.type.value)
            _count(by_severity, record.severity.value)

        recent = [
            RecentError(
                id=record.id,
                timestamp=record.timestamp,
                type=record.type,
                severity=record.severity,
                component=record.component,
                retryable=record.retryable,
            )
            for record in session_records[-RECENT_SESSION_ERRORS:]
        ]

        return SessionStats(
            session_id=session_id,
            total=len(session_records),
            by_type=by_type,
            by_severity=by_severity,
            recent=recent,
        )

    def health(self, records: Sequence[ErrorRecord], now: Optional[datetime] = None) -> HealthStatus:
        """
        Health summary over the last hour.

        Critical if any critical error occurred in the hour, otherwise
        degraded or warning above the error-count thresholds.

        Args:
            records: Log snapshot in insertion order
            now: Reference time (defaults to the current UTC time)

        Returns:
            HealthStatus for the last hour
        """
        now = now or datetime.now(timezone.utc)
        stats = self.compute(records, "1h", now=now)
        cutoff = now - timedelta(hours=1)
        critical_errors = sum(
            1 for record in records
            if record.severity == ErrorSeverity.CRITICAL and cutoff <= record.timestamp <= now
        )

        if critical_errors > 0:
            status = HealthState.CRITICAL
        elif stats.total > DEGRADED_THRESHOLD:
            status = HealthState.DEGRADED
        elif stats.total > WARNING_THRESHOLD:
            status = HealthState.WARNING
        else:
            status = HealthState.HEALTHY

        return HealthStatus(
            status=status,
            timestamp=now,
            errors_last_hour=stats.total,
            critical_errors=critical_errors,
            error_rate_per_minute=f"{stats.total / 60:.2f}",
            top_error_types=stats.top_errors[:3],
        )
