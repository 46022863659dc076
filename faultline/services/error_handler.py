"""
Centralized error handling facade.

Runs each failure through analysis, sanitization, recovery planning,
logging, counting and pattern detection, and returns one structured
result. ``handle_error`` never raises; stage failures are reported on the
operator logger and the pipeline continues with what it has.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from faultline.config import Settings
from faultline.models.error import ErrorRecord, ErrorType, RawError
from faultline.models.feedback import HandledError
from faultline.models.pattern import ErrorPattern
from faultline.models.recovery import RecoveryPlan
from faultline.models.stats import ErrorCounter, ErrorStats, HealthStatus, SessionStats
from faultline.services.analyzer import DEFAULT_ERROR_TYPE, UNKNOWN_MESSAGE, ErrorAnalyzer
from faultline.services.catalog import ErrorCatalog
from faultline.services.error_log import ErrorLog, ErrorLogSink, generate_error_id
from faultline.services.log_export import LogExporter
from faultline.services.pattern_detector import PatternDetector
from faultline.services.recovery_planner import RecoveryPlanner
from faultline.services.sanitizer import ContextSanitizer
from faultline.services.stats import DEFAULT_WINDOW, StatsAggregator
from faultline.utils.logging import (
    get_logger,
    get_operator_logger,
    log_error_with_context,
    log_handled_error,
)
from faultline.utils.metrics import ErrorCounters, emit_metric


logger = get_logger(__name__)
operator_logger = get_operator_logger(component="error_handler")


class ErrorHandler:
    """
    Error pipeline service.

    Holds its own log, counters and configuration. Construct one per
    application (or per test) and pass it to the code that needs it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        catalog: Optional[ErrorCatalog] = None,
        sanitizer: Optional[ContextSanitizer] = None,
        analyzer: Optional[ErrorAnalyzer] = None,
        planner: Optional[RecoveryPlanner] = None,
        detector: Optional[PatternDetector] = None,
        error_log: Optional[ErrorLog] = None,
        sink: Optional[ErrorLogSink] = None,
        stats: Optional[StatsAggregator] = None,
        exporter: Optional[LogExporter] = None,
    ):
        """
        Initialize the handler.

        Args:
            settings: Configuration; loaded from the environment if None
            catalog: Error taxonomy
            sanitizer: Context sanitizer
            analyzer: Error analyzer
            planner: Recovery planner
            detector: Pattern detector
            error_log: In-memory log; built from settings if None
            sink: Durable sink for a log built from settings
            stats: Statistics aggregator
            exporter: Log exporter; writes into the log directory if None
        """
        self.settings = settings or Settings()
        self.catalog = catalog or ErrorCatalog()
        self.sanitizer = sanitizer or ContextSanitizer()
        self.analyzer = analyzer or ErrorAnalyzer(self.catalog, self.sanitizer)
        self.planner = planner or RecoveryPlanner(self.catalog)
        self.detector = detector or PatternDetector(
            window=timedelta(minutes=self.settings.pattern_window_minutes),
            frequency_threshold=self.settings.high_frequency_threshold,
            component_lookback=self.settings.component_lookback,
            component_threshold=self.settings.component_threshold,
        )
        if error_log is None:
            sink = sink or ErrorLogSink(self.settings.error_log_directory)
            error_log = ErrorLog(capacity=self.settings.max_error_log_size, sink=sink)
        self.error_log = error_log
        self.stats = stats or StatsAggregator()
        self.exporter = exporter or LogExporter(self.settings.error_log_directory)
        self.counters = ErrorCounters()

    def handle_error(self, error: Any, context: Optional[Mapping] = None) -> HandledError:
        """
        Run a failure through the full pipeline.

        Args:
            error: Exception, mapping, RawError or message string
            context: Request context (component, operation, userId,
                sessionId, transcriptId, validationRules, extra keys)

        Returns:
            HandledError describing the classified failure
        """
        context = context if isinstance(context, Mapping) else {}

        record = self._analyze(error, context)
        message = self.catalog.user_message(record.type)
        plan = self._plan(record, context)
        pattern = self._record(record)

        try:
            self._report(record, pattern)
        except Exception as e:
            log_error_with_context(operator_logger, "Error reporting failed", e, error_id=record.id)

        return HandledError(
            type=record.type,
            severity=record.severity,
            message=message.title,
            details=message.details,
            suggestions=message.suggestions,
            recovery_plan=plan,
            pattern=pattern,
            error_id=record.id,
            timestamp=record.timestamp,
            retryable=record.retryable,
            sanitized_context=dict(record.context),
        )

    def _analyze(self, error: Any, context: Mapping) -> ErrorRecord:
        try:
            return self.analyzer.analyze(error, context)
        except Exception as e:
            log_error_with_context(operator_logger, "Error analysis failed", e)

        # Minimal record so the pipeline can continue
        try:
            message = RawError.coerce(error).message
            sanitized = self.sanitizer.sanitize(context)
        except Exception:
            message, sanitized = None, {}
        try:
            return self._fallback_record(message, sanitized)
        except Exception as e:
            log_error_with_context(operator_logger, "Fallback error record rejected context", e)
        return self._fallback_record(message, {})

    def _fallback_record(self, message: Optional[str], context: Dict[str, Any]) -> ErrorRecord:
        classification = self.catalog.classify(DEFAULT_ERROR_TYPE)
        return ErrorRecord(
            id=generate_error_id(),
            timestamp=datetime.now(timezone.utc),
            type=DEFAULT_ERROR_TYPE,
            severity=classification.severity,
            retryable=classification.retryable,
            message=message or UNKNOWN_MESSAGE,
            context=context,
        )

    def _plan(self, record: ErrorRecord, context: Mapping) -> RecoveryPlan:
        try:
            return self.planner.plan(record, context)
        except Exception as e:
            log_error_with_context(operator_logger, "Recovery planning failed", e, error_id=record.id)
            return self.catalog.recovery_template(None)

    def _record(self, record: ErrorRecord) -> Optional[ErrorPattern]:
        """Append, count and detect patterns in one critical section."""
        with self.error_log.lock:
            try:
                self.error_log.append(record)
            except Exception as e:
                log_error_with_context(operator_logger, "Error log append failed", e, error_id=record.id)

            try:
                self.counters.record(record)
            except Exception as e:
                log_error_with_context(operator_logger, "Error counter update failed", e, error_id=record.id)

            try:
                return self.detector.detect(record, self.error_log.snapshot())
            except Exception as e:
                log_error_with_context(operator_logger, "Pattern detection failed", e, error_id=record.id)
                return None

    def _report(self, record: ErrorRecord, pattern: Optional[ErrorPattern]) -> None:
        log_handled_error(logger, record)
        emit_metric(
            "errors_handled",
            1,
            error_type=record.type.value,
            severity=record.severity.value,
            component=record.component,
        )
        if pattern is not None:
            logger.warning(
                f"Error pattern detected: {pattern.description}",
                extra={
                    "error_id": record.id,
                    "error_type": record.type.value,
                    "component": record.component,
                    "pattern_kind": pattern.kind.value,
                    "pattern_count": pattern.count,
                },
            )

    def get_stats(self, window: str = DEFAULT_WINDOW) -> ErrorStats:
        """
        Statistics over a trailing window.

        Args:
            window: Window such as '5m', '1h', '24h' or '7d'

        Returns:
            ErrorStats for the window
        """
        return self.stats.compute(self.error_log.snapshot(), window)

    def get_session_stats(self, session_id: str) -> SessionStats:
        return self.stats.session_stats(self.error_log.snapshot(), session_id)

    def get_health_status(self) -> HealthStatus:
        return self.stats.health(self.error_log.snapshot())

    def get_error(self, error_id: str) -> Optional[ErrorRecord]:
        return _detached(self.error_log.find(error_id))

    def get_error_counts(self) -> Dict[str, ErrorCounter]:
        with self.error_log.lock:
            return self.counters.snapshot()

    def get_last_error(self, error_type: ErrorType) -> Optional[ErrorRecord]:
        with self.error_log.lock:
            return _detached(self.counters.last_error(error_type))

    def clear_logs(self) -> int:
        """
        Empty the log and reset counters together.

        Returns:
            Number of records cleared
        """
        with self.error_log.lock:
            cleared = self.error_log.clear()
            self.counters.reset()
        logger.info(f"Cleared {cleared} error records")
        return cleared

    def export_logs(self, fmt: str = "json") -> Path:
        """
        Export the in-memory log to a file.

        Args:
            fmt: 'json' or 'csv'

        Returns:
            Path of the written file

        Raises:
            ExportError: If the export fails
        """
        return self.exporter.export(self.error_log.snapshot(), fmt)

    def close(self) -> None:
        """Drain pending log writes."""
        if self.error_log.sink is not None:
            self.error_log.sink.close()


def _detached(record: Optional[ErrorRecord]) -> Optional[ErrorRecord]:
    return record.model_copy(deep=True) if record is not None else None


def create_error_handler(settings: Optional[Settings] = None) -> ErrorHandler:
    """
    Create an error handler from settings.

    Args:
        settings: Configuration; loaded from the environment if None

    Returns:
        ErrorHandler instance
    """
    return ErrorHandler(settings)
