"""Error pipeline services package."""

from faultline.services.catalog import ErrorCatalog
from faultline.services.sanitizer import ContextSanitizer
from faultline.services.analyzer import ErrorAnalyzer
from faultline.services.recovery_planner import RecoveryPlanner
from faultline.services.pattern_detector import PatternDetector
from faultline.services.error_log import (
    ErrorLog,
    ErrorLogSink,
    generate_error_id
)
from faultline.services.log_export import (
    LogExporter,
    ExportError
)
from faultline.services.stats import (
    StatsAggregator,
    parse_time_window
)
from faultline.services.error_handler import (
    ErrorHandler,
    create_error_handler
)
from faultline.services.feedback import UserFeedbackSystem

__all__ = [
    'ErrorCatalog',
    'ContextSanitizer',
    'ErrorAnalyzer',
    'RecoveryPlanner',
    'PatternDetector',
    'ErrorLog',
    'ErrorLogSink',
    'generate_error_id',
    'LogExporter',
    'ExportError',
    'StatsAggregator',
    'parse_time_window',
    'ErrorHandler',
    'create_error_handler',
    'UserFeedbackSystem'
]
