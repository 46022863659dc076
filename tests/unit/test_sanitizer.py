"""
Unit tests for context sanitization.
"""

import pytest

from faultline.services.sanitizer import ContextSanitizer, TRUNCATION_MARKER


@pytest.fixture
def sanitizer() -> ContextSanitizer:
    return ContextSanitizer()


def test_removes_sensitive_keys_and_truncates_content(sanitizer):
    """Test the sensitive context scenario end to end."""
    context = {
        "apiKey": "sk-secret",
        "password": "hunter2",
        "token": "abc",
        "sessionToken": "def",
        "content": "x" * 2000,
        "safeData": "keep me",
    }

    sanitized = sanitizer.sanitize(context)

    for key in ("apiKey", "password", "token", "sessionToken"):
        assert key not in sanitized
    assert sanitized["content"] == "x" * 1000 + TRUNCATION_MARKER
    assert sanitized["safeData"] == "keep me"


def test_truncates_every_long_string_field(sanitizer):
    sanitized = sanitizer.sanitize({"transcript": "y" * 1500, "notes": "z" * 1000})

    assert sanitized["transcript"] == "y" * 1000 + TRUNCATION_MARKER
    assert sanitized["notes"] == "z" * 1000


def test_key_matching_is_exact_and_case_sensitive(sanitizer):
    sanitized = sanitizer.sanitize({"APIKEY": 1, "Password": 2, "tokens": 3, "apiKey": 4})

    assert sanitized == {"APIKEY": 1, "Password": 2, "tokens": 3}


def test_non_string_keys_become_strings(sanitizer):
    sanitized = sanitizer.sanitize({1: "x", ("a", "b"): "y", "component": "uploads"})

    assert sanitized == {"1": "x", "('a', 'b')": "y", "component": "uploads"}


def test_non_string_values_pass_through(sanitizer):
    nested = {"apiKey": "inner"}
    sanitized = sanitizer.sanitize({"count": 3, "items": [1, 2], "nested": nested, "none": None})

    assert sanitized["count"] == 3
    assert sanitized["items"] == [1, 2]
    assert sanitized["nested"] is nested
    assert sanitized["none"] is None


def test_input_is_not_mutated(sanitizer):
    context = {"password": "secret", "content": "a" * 1200}

    sanitizer.sanitize(context)

    assert context == {"password": "secret", "content": "a" * 1200}


@pytest.mark.parametrize("context", [None, {}, [], "not a mapping"])
def test_empty_or_invalid_context(sanitizer, context):
    assert sanitizer.sanitize(context) == {}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
