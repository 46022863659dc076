"""
Static error taxonomy.

Maps every error type to its severity, retryability, user-facing wording
and recovery plan template. All lookups are total: types without an entry
fall back to a fixed default.
"""

import logging
from typing import Dict, FrozenSet, Optional, Union

from faultline.models.error import (
    ErrorClassification,
    ErrorMessageTemplate,
    ErrorSeverity,
    ErrorType,
)
from faultline.models.recovery import BackoffKind, RecoveryPlan, RecoveryStrategy


logger = logging.getLogger(__name__)


SEVERITY_CLASSES: Dict[ErrorSeverity, FrozenSet[ErrorType]] = {
    ErrorSeverity.CRITICAL: frozenset({
        ErrorType.DATABASE_ERROR,
        ErrorType.CONFIGURATION_ERROR,
        ErrorType.AUTHENTICATION_ERROR,
    }),
    ErrorSeverity.HIGH: frozenset({
        ErrorType.SERVICE_UNAVAILABLE,
        ErrorType.PROCESSING_ERROR,
        ErrorType.SYSTEM_ERROR,
    }),
    ErrorSeverity.MEDIUM: frozenset({
        ErrorType.API_ERROR,
        ErrorType.NETWORK_ERROR,
        ErrorType.TIMEOUT_ERROR,
        ErrorType.RATE_LIMIT_ERROR,
    }),
}

RETRYABLE_TYPES: FrozenSet[ErrorType] = frozenset({
    ErrorType.NETWORK_ERROR,
    ErrorType.TIMEOUT_ERROR,
    ErrorType.RATE_LIMIT_ERROR,
    ErrorType.SERVICE_UNAVAILABLE,
})

DEFAULT_SEVERITY = ErrorSeverity.LOW

DEFAULT_MESSAGE = ErrorMessageTemplate(
    title="An unexpected error occurred",
    details="Something went wrong while processing your request.",
    suggestions=[
        "Try your request again",
        "Contact support if the issue persists",
        "Check the system status page",
    ],
)

DEFAULT_RECOVERY_PLAN = RecoveryPlan(
    strategy=RecoveryStrategy.USER_ACTION_REQUIRED,
    required_actions=["retry_request", "contact_support"],
    delay_ms=5000,
)

USER_MESSAGES: Dict[ErrorType, ErrorMessageTemplate] = {
    ErrorType.API_ERROR: ErrorMessageTemplate(
        title="AI service encountered an issue",
        details="The AI summarization service returned an unexpected response.",
        suggestions=[
            "Try generating the summary again",
            "Check if your transcript content is valid",
            "Contact support if the issue persists",
        ],
    ),
    ErrorType.NETWORK_ERROR: ErrorMessageTemplate(
        title="Network connection issue",
        details="Unable to connect to the AI service due to network problems.",
        suggestions=[
            "Check your internet connection",
            "Try again in a few moments",
            "Contact your network administrator if issues persist",
        ],
    ),
    ErrorType.RATE_LIMIT_ERROR: ErrorMessageTemplate(
        title="Too many requests",
        details="You have exceeded the rate limit for AI summary generation.",
        suggestions=[
            "Wait a few minutes before trying again",
            "Consider upgrading your plan for higher limits",
            "Batch your requests to avoid hitting limits",
        ],
    ),
    ErrorType.AUTHENTICATION_ERROR: ErrorMessageTemplate(
        title="Authentication failed",
        details="The AI service authentication credentials are invalid or expired.",
        suggestions=[
            "Contact your administrator",
            "Check if your account is still active",
            "Try logging out and back in",
        ],
    ),
    ErrorType.SERVICE_UNAVAILABLE: ErrorMessageTemplate(
        title="AI service temporarily unavailable",
        details="The AI summarization service is currently experiencing issues.",
        suggestions=[
            "Try again in a few minutes",
            "Check the service status page",
            "Use a different summary style if available",
        ],
    ),
    ErrorType.TIMEOUT_ERROR: ErrorMessageTemplate(
        title="Request timed out",
        details="The AI service took too long to respond.",
        suggestions=[
            "Try with a shorter transcript",
            "Use a faster summary style (executive)",
            "Try again with better network conditions",
        ],
    ),
    ErrorType.VALIDATION_ERROR: ErrorMessageTemplate(
        title="Invalid input data",
        details="The provided data does not meet the required format or constraints.",
        suggestions=[
            "Check your transcript content",
            "Ensure all required fields are filled",
            "Verify the file format is supported",
        ],
    ),
    ErrorType.PROCESSING_ERROR: ErrorMessageTemplate(
        title="Processing failed",
        details="An error occurred while processing your summary request.",
        suggestions=[
            "Try generating the summary again",
            "Use a different summary style",
            "Check if your transcript is complete",
        ],
    ),
    ErrorType.CONTENT_ERROR: ErrorMessageTemplate(
        title="Content issue detected",
        details="The transcript content appears to be empty or invalid.",
        suggestions=[
            "Upload a valid transcript file",
            "Check that the file contains readable text",
            "Ensure the transcript is not corrupted",
        ],
    ),
    ErrorType.DATABASE_ERROR: ErrorMessageTemplate(
        title="Data storage issue",
        details="Unable to save or retrieve data from the database.",
        suggestions=[
            "Try your request again",
            "Contact support if the issue persists",
            "Check if you have sufficient storage quota",
        ],
    ),
    ErrorType.SESSION_ERROR: ErrorMessageTemplate(
        title="Session expired",
        details="Your session has expired or is invalid.",
        suggestions=[
            "Refresh the page and try again",
            "Log out and log back in",
            "Clear your browser cache and cookies",
        ],
    ),
    ErrorType.PERMISSION_ERROR: ErrorMessageTemplate(
        title="Access denied",
        details="You do not have permission to perform this action.",
        suggestions=[
            "Contact your administrator for access",
            "Check if your account has the required permissions",
            "Verify you are accessing the correct resource",
        ],
    ),
    ErrorType.QUOTA_ERROR: ErrorMessageTemplate(
        title="Usage quota exceeded",
        details="You have reached your usage limit for summary generation.",
        suggestions=[
            "Wait until your quota resets",
            "Consider upgrading your plan",
            "Contact support for quota increase",
        ],
    ),
}

RECOVERY_TEMPLATES: Dict[ErrorType, RecoveryPlan] = {
    ErrorType.RATE_LIMIT_ERROR: RecoveryPlan(
        strategy=RecoveryStrategy.RETRY,
        delay_ms=60000,
        max_retries=3,
        backoff=BackoffKind.EXPONENTIAL,
    ),
    ErrorType.NETWORK_ERROR: RecoveryPlan(
        strategy=RecoveryStrategy.RETRY,
        delay_ms=5000,
        max_retries=3,
        backoff=BackoffKind.LINEAR,
    ),
    ErrorType.SERVICE_UNAVAILABLE: RecoveryPlan(
        strategy=RecoveryStrategy.FALLBACK,
        fallback_options=["use_fallback_model", "retry_later"],
        delay_ms=30000,
    ),
    ErrorType.TIMEOUT_ERROR: RecoveryPlan(
        strategy=RecoveryStrategy.FALLBACK,
        fallback_options=["use_fallback_model", "reduce_content_size"],
        delay_ms=10000,
    ),
    ErrorType.PROCESSING_ERROR: RecoveryPlan(
        strategy=RecoveryStrategy.GRACEFUL_DEGRADATION,
        degradation_options=["simplified_processing", "basic_summary"],
        fallback_content="Unable to generate full summary. Please try again.",
    ),
    ErrorType.AUTHENTICATION_ERROR: RecoveryPlan(
        strategy=RecoveryStrategy.SYSTEM_INTERVENTION,
        intervention_required="admin_action",
        user_action="contact_support",
    ),
    ErrorType.VALIDATION_ERROR: RecoveryPlan(
        strategy=RecoveryStrategy.USER_ACTION_REQUIRED,
        required_actions=["fix_input_data", "check_format"],
        validation_rules=[],
    ),
}


ErrorTypeLike = Union[ErrorType, str]


class ErrorCatalog:
    """
    Lookup tables for the error taxonomy.

    Every method accepts an ErrorType or its string value. Unknown values
    resolve to the default entry rather than raising.
    """

    def __init__(
        self,
        user_messages: Optional[Dict[ErrorType, ErrorMessageTemplate]] = None,
        recovery_templates: Optional[Dict[ErrorType, RecoveryPlan]] = None,
    ):
        """
        Initialize the catalog.

        Args:
            user_messages: Overrides merged over the built-in messages
            recovery_templates: Overrides merged over the built-in plans
        """
        self._user_messages = dict(USER_MESSAGES)
        if user_messages:
            self._user_messages.update(user_messages)

        self._recovery_templates = dict(RECOVERY_TEMPLATES)
        if recovery_templates:
            self._recovery_templates.update(recovery_templates)

    @staticmethod
    def resolve(error_type: ErrorTypeLike) -> Optional[ErrorType]:
        """Return the ErrorType for a value, or None if it is not one."""
        if isinstance(error_type, ErrorType):
            return error_type
        try:
            return ErrorType(error_type)
        except ValueError:
            logger.debug(f"Unmapped error type: {error_type!r}")
            return None

    def severity(self, error_type: ErrorTypeLike) -> ErrorSeverity:
        resolved = self.resolve(error_type)
        for severity, members in SEVERITY_CLASSES.items():
            if resolved in members:
                return severity
        return DEFAULT_SEVERITY

    def is_retryable(self, error_type: ErrorTypeLike) -> bool:
        return self.resolve(error_type) in RETRYABLE_TYPES

    def classify(self, error_type: ErrorTypeLike) -> ErrorClassification:
        """
        Severity and retryability for an error type.

        Args:
            error_type: Error type to look up

        Returns:
            ErrorClassification for the type
        """
        return ErrorClassification(
            severity=self.severity(error_type),
            retryable=self.is_retryable(error_type),
        )

    def user_message(self, error_type: ErrorTypeLike) -> ErrorMessageTemplate:
        """
        User-facing wording for an error type.

        Args:
            error_type: Error type to look up

        Returns:
            Copy of the message template, or the default message
        """
        template = self._user_messages.get(self.resolve(error_type), DEFAULT_MESSAGE)
        return template.model_copy(deep=True)

    def recovery_template(self, error_type: ErrorTypeLike) -> RecoveryPlan:
        """
        Recovery plan template for an error type.

        Args:
            error_type: Error type to look up

        Returns:
            Deep copy of the template, or of the default plan
        """
        template = self._recovery_templates.get(self.resolve(error_type), DEFAULT_RECOVERY_PLAN)
        return template.model_copy(deep=True)
