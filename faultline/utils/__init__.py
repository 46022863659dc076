"""
Utility modules for the faultline error pipeline.
"""

from faultline.utils.logging import (
    OPERATOR_LOGGER_NAME,
    JSONFormatter,
    get_logger,
    get_operator_logger,
    setup_logging,
    log_handled_error,
    log_error_with_context,
)
from faultline.utils.metrics import (
    ErrorCounters,
    emit_metric,
)

__all__ = [
    "OPERATOR_LOGGER_NAME",
    "JSONFormatter",
    "get_logger",
    "get_operator_logger",
    "setup_logging",
    "log_handled_error",
    "log_error_with_context",
    "ErrorCounters",
    "emit_metric",
]
