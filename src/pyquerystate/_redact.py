"""Helpers for safe debug logging.

Query parameters carry user input, and structured values can be large or
hold credentials (reset tokens, invite codes). Values are masked and
truncated before they reach DEBUG logs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from pyquerystate.models.value import ValueShape, shape_of

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "secret", "token", "access_token", "refresh_token", "code", "api_key", "session"}
)

# Structured values decoded from a URL are shallow in practice.
_MAX_DEPTH = 20


def is_sensitive_key(key: str) -> bool:
    return key.lower() in _SENSITIVE_KEYS


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* that is safe to log."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    match shape_of(value):
        case ValueShape.STRING:
            text = value if isinstance(value, str) else repr(value)
            return text if len(text) <= max_string else f"{text[:max_string]}…<truncated>"
        case ValueShape.OBJECT:
            fields = value.model_dump(mode="json") if isinstance(value, BaseModel) else value
            return {
                str(k): "<redacted>" if is_sensitive_key(str(k)) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
                for k, v in fields.items()
            }
        case ValueShape.ARRAY:
            return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]
    return value
