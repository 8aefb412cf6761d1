"""Value codec: typed values to and from their query-string text.

``encode`` produces the plain text form of a value; the binding layer
percent-escapes it before putting it into the query string. ``decode``
reverses both steps and never raises: malformed input degrades to the raw
text or to the caller's hint.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, unquote

from pydantic import BaseModel, ValidationError

from pyquerystate.exceptions import QueryStateDecodeError
from pyquerystate.models.value import ValueShape, shape_of

_logger = logging.getLogger(__name__)

# Characters left unescaped by a browser's encodeURIComponent, on top of
# the alphanumerics and "_.-~" that quote() never escapes.
_URI_COMPONENT_SAFE = "!*'()"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_UNSIGNED_INT = re.compile(r"[0-9]+")
_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def percent_encode(text: str) -> str:
    """Escape *text* the way ``encodeURIComponent`` does."""
    return quote(text, safe=_URI_COMPONENT_SAFE)


def encode_key(name: str) -> str:
    """Derive the store/query key for a public parameter name."""
    return percent_encode(name)


def _strict_percent_decode(text: str) -> str:
    if _BAD_ESCAPE.search(text):
        raise QueryStateDecodeError("Malformed percent escape", raw=text)
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError as exc:
        raise QueryStateDecodeError("Percent escapes are not valid UTF-8", raw=text) from exc


def percent_decode(text: str) -> str:
    """Percent-decode *text*, returning it unchanged when malformed."""
    try:
        return _strict_percent_decode(text)
    except QueryStateDecodeError:
        _logger.debug("Keeping raw text for malformed escape sequence")
        return text


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return str(value)


def encode(value: Any) -> str:
    """Return the text form of *value*.

    ``None`` becomes ``""``; objects and arrays become compact JSON;
    booleans become ``"true"``/``"false"``; anything else uses ``str``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    return str(value)


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise QueryStateDecodeError("Not a boolean", raw=text)


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        # Digit strings beyond sys.get_int_max_str_digits() are rejected by int().
        raise QueryStateDecodeError("Integer text too long", raw=text) from exc


def _parse_number(text: str, *, prefer_int: bool) -> int | float:
    if prefer_int and _SIGNED_INT.fullmatch(text):
        return _parse_int(text)
    if _DECIMAL.fullmatch(text):
        number = float(text)
        if math.isfinite(number):
            return number
    raise QueryStateDecodeError("Not a finite number", raw=text)


def _parse_structured(text: str, expected: ValueShape | None = None) -> Any:
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        raise QueryStateDecodeError("Invalid JSON", raw=text) from exc
    except RecursionError as exc:
        raise QueryStateDecodeError("JSON nested too deeply", raw=text) from exc
    if expected is not None and shape_of(parsed) is not expected:
        raise QueryStateDecodeError(f"Expected {expected}, got {shape_of(parsed)}", raw=text)
    return parsed


def _infer(text: str) -> Any:
    if text in ("true", "false"):
        return text == "true"
    try:
        if _UNSIGNED_INT.fullmatch(text):
            return _parse_int(text)
        if text[:1] in ("{", "["):
            return _parse_structured(text)
    except QueryStateDecodeError:
        return text
    return text


def _coerce_to_hint(text: str, hint: Any) -> Any:
    shape = shape_of(hint)
    match shape:
        case ValueShape.NULL:
            return _infer(text)
        case ValueShape.STRING:
            return text
        case ValueShape.BOOLEAN:
            return _parse_bool(text)
        case ValueShape.NUMBER:
            return _parse_number(text, prefer_int=not isinstance(hint, float))
        case ValueShape.OBJECT if isinstance(hint, BaseModel):
            try:
                return type(hint).model_validate_json(text)
            except (ValidationError, RecursionError) as exc:
                raise QueryStateDecodeError(f"Invalid {type(hint).__name__}", raw=text) from exc
        case ValueShape.OBJECT | ValueShape.ARRAY:
            parsed = _parse_structured(text, shape)
            if isinstance(hint, tuple):
                return tuple(parsed)
            return parsed
    raise QueryStateDecodeError(f"Unsupported hint shape {shape}", raw=text)


def decode(raw: str | None, hint: Any = None) -> Any:
    """Decode a raw query value.

    An absent *raw* returns *hint* unchanged. Otherwise the text is
    percent-decoded and then either inferred (no hint) or coerced to the
    hint's shape. Coercion failures return *hint*.

    Because decoding starts with a percent-decode, ``decode(encode(v), v)``
    only round-trips text free of valid ``%XX`` sequences: ``"a%2Bb"``
    comes back as ``"a+b"``. Values written by a binding are escaped with
    :func:`percent_encode` first, so ``decode(percent_encode(encode(v)), v)``
    round-trips all of them.
    """
    if raw is None:
        return hint
    text = percent_decode(raw)
    try:
        return _coerce_to_hint(text, hint)
    except QueryStateDecodeError as exc:
        _logger.debug("Falling back to hint for undecodable value: %s", exc)
        return hint
