"""Initial parameter snapshots.

Parameters known before the first render arrive in different shapes: a
``URLSearchParams``-like object with ``get``, a plain mapping of strings,
or a mapping of string lists (as produced by ``urllib.parse.parse_qs``).
:func:`get_param_value` reads any of them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, TypeAlias

from aiohttp import web
from multidict import MultiDictProxy


class SearchParamsLike(Protocol):
    def get(self, key: str) -> Any:
        ...


InitialParams: TypeAlias = SearchParamsLike | Mapping[str, Any] | None


def _first(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (str, bytes, bytearray)):
        return value.decode() if isinstance(value, (bytes, bytearray)) else value
    if isinstance(value, Sequence):
        return _first(value[0]) if value else None
    return str(value)


def get_param_value(params: InitialParams, key: str) -> str | None:
    """Return the raw value for *key*, or ``None`` when absent."""
    if params is None:
        return None
    getter = getattr(params, "get", None)
    if callable(getter):
        return _first(getter(key))
    try:
        return _first(params[key])  # type: ignore[index]
    except (KeyError, IndexError, TypeError):
        return None


def params_from_request(request: web.Request) -> MultiDictProxy[str]:
    """Use a server request's query parameters as the initial snapshot."""
    return request.query
