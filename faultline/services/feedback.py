"""
User feedback system.

Turns handled errors into user-facing messages, actionable steps and
support information.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from faultline.config import Settings
from faultline.models.error import ErrorSeverity, ErrorType
from faultline.models.feedback import (
    ActionType,
    FeedbackResult,
    HandledError,
    SupportInfo,
    UserAction,
    UserMessage,
)
from faultline.services.error_handler import ErrorHandler
from faultline.utils.logging import get_operator_logger, log_error_with_context


operator_logger = get_operator_logger(component="user_feedback")

DEFAULT_RETRY_DELAY_MS = 5000
DEFAULT_SUPPORT_EMAIL = "support@meetingsummarizer.com"
DEFAULT_STATUS_PAGE = "https://status.meetingsummarizer.com"
REPORT_URL_TEMPLATE = "/api/errors/report/{error_id}"

SEVERITY_TAGS: Dict[ErrorSeverity, str] = {
    ErrorSeverity.LOW: "⚠️",
    ErrorSeverity.MEDIUM: "❌",
    ErrorSeverity.HIGH: "🚨",
    ErrorSeverity.CRITICAL: "🔥",
}

FALLBACK_LABELS: Dict[str, str] = {
    "use_fallback_model": "Use Fast Model",
    "retry_later": "Try Later",
    "reduce_content_size": "Shorten Content",
    "simplified_processing": "Basic Summary",
    "basic_summary": "Simple Format",
}
DEFAULT_FALLBACK_LABEL = "Alternative Option"

FALLBACK_DESCRIPTIONS: Dict[str, str] = {
    "use_fallback_model": "Use a faster model that may provide a simpler summary",
    "retry_later": "Wait a few minutes and try your request again",
    "reduce_content_size": "Try with a shorter transcript or fewer custom instructions",
    "simplified_processing": "Generate a basic summary without advanced formatting",
    "basic_summary": "Create a simple text summary without structure analysis",
}
DEFAULT_FALLBACK_DESCRIPTION = "Try an alternative approach"

DOCUMENTATION_LINKS: Dict[ErrorType, str] = {
    ErrorType.API_ERROR: "/docs/api-troubleshooting",
    ErrorType.NETWORK_ERROR: "/docs/network-issues",
    ErrorType.RATE_LIMIT_ERROR: "/docs/rate-limits",
    ErrorType.AUTHENTICATION_ERROR: "/docs/authentication",
    ErrorType.VALIDATION_ERROR: "/docs/input-validation",
    ErrorType.PROCESSING_ERROR: "/docs/processing-issues",
}
DEFAULT_DOCUMENTATION = "/docs/general-troubleshooting"


def fallback_label(option: str) -> str:
    return FALLBACK_LABELS.get(option, DEFAULT_FALLBACK_LABEL)


def fallback_description(option: str) -> str:
    return FALLBACK_DESCRIPTIONS.get(option, DEFAULT_FALLBACK_DESCRIPTION)


def documentation_for(error_type: ErrorType) -> str:
    return DOCUMENTATION_LINKS.get(error_type, DEFAULT_DOCUMENTATION)


class UserFeedbackSystem:
    """
    Formats handled errors for the people who hit them.

    Technical context is only included outside production.
    """

    def __init__(self, handler: ErrorHandler, settings: Optional[Settings] = None):
        """
        Initialize the feedback system.

        Args:
            handler: Error handler the failures are routed through
            settings: Configuration; defaults to the handler's settings
        """
        self.handler = handler
        self.settings = settings or handler.settings

    def generate_error_response(self, error: Any, context: Optional[Mapping] = None) -> FeedbackResult:
        """
        Handle a failure and build the user-facing response.

        Args:
            error: Exception, mapping, RawError or message string
            context: Request context

        Returns:
            FeedbackResult with message, actions and support details
        """
        handled = self.handler.handle_error(error, context)

        try:
            user_message = self.format_user_message(handled)
            actions = self.generate_user_actions(handled)
        except Exception as e:
            log_error_with_context(
                operator_logger, "Failed to format user feedback", e, error_id=handled.error_id
            )
            user_message = UserMessage(title=handled.message, description=handled.details)
            actions = []

        return FeedbackResult(
            message=handled.message,
            type=handled.type,
            severity=handled.severity,
            user_message=user_message,
            actions=actions,
            support=self.generate_support_info(handled),
            error_id=handled.error_id,
            timestamp=handled.timestamp,
        )

    def format_user_message(self, handled: HandledError) -> UserMessage:
        tag = SEVERITY_TAGS.get(handled.severity, "")
        return UserMessage(
            title=f"{tag} {handled.message}".strip(),
            description=handled.details,
            technical=dict(handled.sanitized_context) if self.settings.show_technical_details else None,
        )

    def generate_user_actions(self, handled: HandledError) -> List[UserAction]:
        """
        Actionable steps, in order: retry, fallbacks, then suggestions.

        Args:
            handled: Result of the error handler

        Returns:
            Ordered list of user actions
        """
        actions: List[UserAction] = []
        plan = handled.recovery_plan

        if handled.retryable:
            actions.append(UserAction(
                type=ActionType.RETRY,
                label="Try Again",
                description="Retry your request",
                primary=True,
                delay_ms=plan.delay_ms or DEFAULT_RETRY_DELAY_MS,
            ))

        for option in plan.fallback_options:
            actions.append(UserAction(
                type=ActionType.FALLBACK,
                label=fallback_label(option),
                description=fallback_description(option),
            ))

        for index, suggestion in enumerate(handled.suggestions, start=1):
            actions.append(UserAction(
                type=ActionType.SUGGESTION,
                label=f"Step {index}",
                description=suggestion,
            ))

        return actions

    def generate_support_info(self, handled: HandledError) -> SupportInfo:
        return SupportInfo(
            error_id=handled.error_id,
            report_url=REPORT_URL_TEMPLATE.format(error_id=handled.error_id),
            contact_email=self.settings.support_email or DEFAULT_SUPPORT_EMAIL,
            status_page=self.settings.status_page_url or DEFAULT_STATUS_PAGE,
            documentation=documentation_for(handled.type),
        )
