"""Context sanitization before errors are stored or exported."""

from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, Optional


SENSITIVE_KEYS: FrozenSet[str] = frozenset({"apiKey", "password", "token", "sessionToken"})
MAX_FIELD_LENGTH = 1000
TRUNCATION_MARKER = "... [truncated]"


class ContextSanitizer:
    """Strips sensitive keys and truncates oversized string fields."""

    def __init__(
        self,
        sensitive_keys: FrozenSet[str] = SENSITIVE_KEYS,
        max_field_length: int = MAX_FIELD_LENGTH,
        marker: str = TRUNCATION_MARKER,
    ):
        self.sensitive_keys = frozenset(sensitive_keys)
        self.max_field_length = max_field_length
        self.marker = marker

    def sanitize(self, context: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Return a sanitized copy of a context map.

        Keys are matched exactly and case-sensitively, and returned as
        strings. Only top-level string values are truncated; the input is
        never modified.

        Args:
            context: Arbitrary context map (None is treated as empty)

        Returns:
            New dict without sensitive keys and with long strings truncated
        """
        if not context or not isinstance(context, Mapping):
            return {}

        sanitized: Dict[str, Any] = {}
        for key, value in context.items():
            if key in self.sensitive_keys:
                continue
            if isinstance(value, str) and len(value) > self.max_field_length:
                value = value[:self.max_field_length] + self.marker
            sanitized[str(key)] = value
        return sanitized
