"""
Unit tests for the user feedback system.
"""

from unittest.mock import patch

import pytest

from faultline.config import Settings
from faultline.models.error import ErrorSeverity, ErrorType
from faultline.models.feedback import ActionType
from faultline.models.recovery import RecoveryPlan, RecoveryStrategy
from faultline.services.catalog import ErrorCatalog
from faultline.services.error_handler import ErrorHandler
from faultline.services.feedback import (
    DEFAULT_DOCUMENTATION,
    UserFeedbackSystem,
    documentation_for,
    fallback_description,
    fallback_label,
)


def _settings(tmp_path, **overrides) -> Settings:
    return Settings(_env_file=None, error_log_directory=str(tmp_path), **overrides)


@pytest.fixture
def handler(tmp_path):
    handler = ErrorHandler(_settings(tmp_path))
    yield handler
    handler.close()


@pytest.fixture
def feedback(handler) -> UserFeedbackSystem:
    return UserFeedbackSystem(handler)


class TestUserActions:
    """Test action ordering and labels."""

    def test_retryable_error_offers_retry_first(self, feedback):
        result = feedback.generate_error_response({"code": "ETIMEDOUT"})

        assert result.type == ErrorType.TIMEOUT_ERROR
        types = [action.type for action in result.actions]
        assert types == [
            ActionType.RETRY,
            ActionType.FALLBACK,
            ActionType.FALLBACK,
            ActionType.SUGGESTION,
            ActionType.SUGGESTION,
            ActionType.SUGGESTION,
        ]
        retry = result.actions[0]
        assert retry.label == "Try Again"
        assert retry.primary is True
        assert retry.delay_ms == 10000
        assert [action.label for action in result.actions[1:3]] == ["Use Fast Model", "Shorten Content"]

    def test_retry_delay_defaults(self, tmp_path):
        catalog = ErrorCatalog(recovery_templates={
            ErrorType.NETWORK_ERROR: RecoveryPlan(strategy=RecoveryStrategy.RETRY, max_retries=1),
        })
        handler = ErrorHandler(_settings(tmp_path), catalog=catalog)
        feedback = UserFeedbackSystem(handler)

        result = feedback.generate_error_response({"code": "ECONNREFUSED"})
        handler.close()

        assert result.actions[0].type == ActionType.RETRY
        assert result.actions[0].delay_ms == 5000

    def test_non_retryable_error_has_no_retry(self, feedback):
        result = feedback.generate_error_response({"status": 401})

        assert all(action.type != ActionType.RETRY for action in result.actions)
        assert not any(action.primary for action in result.actions)

    def test_suggestions_become_numbered_steps(self, feedback):
        result = feedback.generate_error_response({"message": "content missing"})

        suggestions = [action for action in result.actions if action.type == ActionType.SUGGESTION]
        assert [action.label for action in suggestions] == ["Step 1", "Step 2", "Step 3"]
        assert suggestions[0].description == "Upload a valid transcript file"

    def test_degradation_options_are_not_fallback_actions(self, feedback):
        result = feedback.generate_error_response({"message": "processing failed"})

        assert all(action.type == ActionType.SUGGESTION for action in result.actions)


class TestUserMessage:
    """Test user-facing message formatting."""

    @pytest.mark.parametrize("error,tag", [
        ({"name": "ValidationError"}, "⚠️"),
        ({"status": 429}, "❌"),
        ({"status": 503}, "🚨"),
        ({"status": 401}, "🔥"),
    ])
    def test_title_carries_severity_tag(self, feedback, error, tag):
        result = feedback.generate_error_response(error)

        assert result.user_message.title.startswith(tag)
        assert result.user_message.title.endswith(result.message)

    def test_production_hides_technical_details(self, feedback):
        result = feedback.generate_error_response({"status": 500}, {"component": "summaries"})

        assert result.user_message.technical is None

    def test_development_shows_sanitized_context(self, tmp_path):
        handler = ErrorHandler(_settings(tmp_path, environment="development"))
        feedback = UserFeedbackSystem(handler)

        result = feedback.generate_error_response(
            {"status": 500}, {"component": "summaries", "password": "secret"}
        )
        handler.close()

        assert result.user_message.technical == {"component": "summaries"}

    def test_non_string_context_keys(self, feedback):
        result = feedback.generate_error_response(ValueError("boom"), {"component": "c", 1: "x"})

        assert result.type == ErrorType.SYSTEM_ERROR
        assert result.user_message.title.endswith("An unexpected error occurred")

    def test_formatting_failure_falls_back(self, feedback):
        with patch.object(feedback, "generate_user_actions", side_effect=RuntimeError("boom")):
            result = feedback.generate_error_response({"status": 429})

        assert result.user_message.title == "Too many requests"
        assert result.actions == []
        assert result.severity == ErrorSeverity.MEDIUM


class TestSupportInfo:
    """Test support details."""

    def test_support_info(self, feedback):
        result = feedback.generate_error_response({"status": 429})

        support = result.support
        assert support.error_id == result.error_id
        assert support.report_url == f"/api/errors/report/{result.error_id}"
        assert support.contact_email == "support@meetingsummarizer.com"
        assert support.status_page == "https://status.meetingsummarizer.com"
        assert support.documentation == "/docs/rate-limits"

    def test_support_contacts_from_settings(self, tmp_path):
        handler = ErrorHandler(_settings(
            tmp_path,
            support_email="help@example.com",
            status_page_url="https://status.example.com",
        ))
        feedback = UserFeedbackSystem(handler)

        result = feedback.generate_error_response({"status": 500})
        handler.close()

        assert result.support.contact_email == "help@example.com"
        assert result.support.status_page == "https://status.example.com"
        assert result.support.documentation == DEFAULT_DOCUMENTATION


def test_lookup_helpers():
    assert fallback_label("retry_later") == "Try Later"
    assert fallback_label("something_else") == "Alternative Option"
    assert fallback_description("something_else") == "Try an alternative approach"
    assert documentation_for(ErrorType.NETWORK_ERROR) == "/docs/network-issues"
    assert documentation_for(ErrorType.QUOTA_ERROR) == "/docs/general-troubleshooting"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
