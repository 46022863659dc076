"""
Error analysis: turns a raw failure into a classified ErrorRecord.

Categorization is an ordered list of (predicate, ErrorType) rules,
evaluated first-match-wins. New categories are added by extending the
rule list, not by editing control flow.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, FrozenSet, List, Optional, Sequence, Tuple

from faultline.models.error import ErrorRecord, ErrorSeverity, ErrorType, RawError
from faultline.services.catalog import ErrorCatalog
from faultline.services.error_log import generate_error_id
from faultline.services.sanitizer import ContextSanitizer


Predicate = Callable[[RawError], bool]
CategorizationRule = Tuple[Predicate, ErrorType]

NETWORK_ERROR_CODES: FrozenSet[str] = frozenset({"ECONNREFUSED", "ENOTFOUND"})
TIMEOUT_ERROR_CODES: FrozenSet[str] = frozenset({"ETIMEDOUT"})
DATABASE_ERROR_NAMES: FrozenSet[str] = frozenset({
    "DatabaseError",
    "OperationalError",
    "IntegrityError",
    "ProgrammingError",
    "SQLAlchemyError",
    "SequelizeError",
})
VALIDATION_ERROR_NAMES: FrozenSet[str] = frozenset({"ValidationError"})

UNKNOWN_MESSAGE = "Unknown error"


def status_equals(status: int) -> Predicate:
    return lambda error: error.status == status


def status_at_least(status: int) -> Predicate:
    return lambda error: error.status is not None and error.status >= status


def code_in(codes: FrozenSet[str]) -> Predicate:
    return lambda error: error.code in codes


def name_in(names: FrozenSet[str]) -> Predicate:
    return lambda error: error.name in names


def message_contains(*needles: str) -> Predicate:
    return lambda error: bool(error.message) and any(needle in error.message for needle in needles)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda error: any(predicate(error) for predicate in predicates)


CATEGORIZATION_RULES: List[CategorizationRule] = [
    # HTTP status
    (status_equals(401), ErrorType.AUTHENTICATION_ERROR),
    (status_equals(403), ErrorType.PERMISSION_ERROR),
    (status_equals(429), ErrorType.RATE_LIMIT_ERROR),
    (status_at_least(500), ErrorType.SERVICE_UNAVAILABLE),
    (status_at_least(400), ErrorType.API_ERROR),
    # Network
    (code_in(NETWORK_ERROR_CODES), ErrorType.NETWORK_ERROR),
    (any_of(code_in(TIMEOUT_ERROR_CODES), message_contains("timeout")), ErrorType.TIMEOUT_ERROR),
    # Storage
    (any_of(name_in(DATABASE_ERROR_NAMES), message_contains("database")), ErrorType.DATABASE_ERROR),
    # Input
    (any_of(name_in(VALIDATION_ERROR_NAMES), message_contains("validation")), ErrorType.VALIDATION_ERROR),
    (message_contains("processing", "format"), ErrorType.PROCESSING_ERROR),
    (message_contains("content", "empty"), ErrorType.CONTENT_ERROR),
]

DEFAULT_ERROR_TYPE = ErrorType.SYSTEM_ERROR


class ErrorAnalyzer:
    """
    Classifies failures into structured error records.

    Uses the ordered categorization rules, then the catalog for severity
    and retryability, and attaches a sanitized copy of the context.
    """

    def __init__(
        self,
        catalog: Optional[ErrorCatalog] = None,
        sanitizer: Optional[ContextSanitizer] = None,
        extra_rules: Optional[Sequence[CategorizationRule]] = None,
        id_factory: Callable[[], str] = generate_error_id,
    ):
        """
        Initialize the analyzer.

        Args:
            catalog: Taxonomy used for severity and retryability
            sanitizer: Sanitizer applied to the context stored on records
            extra_rules: Rules evaluated after the built-in ones, before the
                SYSTEM_ERROR fallback
            id_factory: Callable producing fresh error ids
        """
        self.catalog = catalog or ErrorCatalog()
        self.sanitizer = sanitizer or ContextSanitizer()
        self.rules: List[CategorizationRule] = list(CATEGORIZATION_RULES)
        if extra_rules:
            self.rules.extend(extra_rules)
        self._id_factory = id_factory

    def categorize(self, error: Any) -> ErrorType:
        """
        Assign an error type to a failure.

        Args:
            error: Exception, mapping, RawError or message string

        Returns:
            Type of the first matching rule, SYSTEM_ERROR if none match
        """
        raw = RawError.coerce(error)
        for predicate, error_type in self.rules:
            if predicate(raw):
                return error_type
        return DEFAULT_ERROR_TYPE

    def severity(self, error_type: ErrorType) -> ErrorSeverity:
        return self.catalog.severity(error_type)

    def is_retryable(self, error_type: ErrorType) -> bool:
        return self.catalog.is_retryable(error_type)

    def analyze(self, error: Any, context: Optional[Mapping] = None) -> ErrorRecord:
        """
        Build a classified record for a failure.

        Args:
            error: Exception, mapping, RawError or message string
            context: Request context; recognized keys are component,
                operation, userId, sessionId and transcriptId

        Returns:
            New ErrorRecord carrying a sanitized copy of the context
        """
        raw = RawError.coerce(error)
        context = context if isinstance(context, Mapping) else {}
        error_type = self.categorize(raw)
        classification = self.catalog.classify(error_type)

        return ErrorRecord(
            id=self._id_factory(),
            timestamp=datetime.now(timezone.utc),
            type=error_type,
            severity=classification.severity,
            retryable=classification.retryable,
            component=_context_str(context, "component", "unknown"),
            operation=_context_str(context, "operation", "unknown"),
            user_id=_context_str(context, "userId", "anonymous"),
            session_id=_context_str(context, "sessionId", None),
            transcript_id=_context_str(context, "transcriptId", None),
            message=raw.message or UNKNOWN_MESSAGE,
            context=self.sanitizer.sanitize(context),
        )


def _context_str(context: Mapping, key: str, default: Optional[str]) -> Optional[str]:
    value = context.get(key)
    if value is None or value == "":
        return default
    return str(value)
