"""Value shapes a query parameter can hold.

A query value is one of a small closed set of shapes. The codec's
hint-driven fallback logic dispatches on :class:`ValueShape`, so every
branch is covered by :func:`shape_of`.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import BaseModel

QueryValue: TypeAlias = str | int | float | bool | None | dict[str, Any] | list[Any] | BaseModel
"""Any value a binding can hold."""


class ValueShape(enum.StrEnum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"

    @property
    def is_structured(self) -> bool:
        return self in (ValueShape.OBJECT, ValueShape.ARRAY)


def shape_of(value: Any) -> ValueShape:
    """Classify *value* into its :class:`ValueShape`.

    ``bool`` is tested before numbers because it subclasses ``int``.
    Tuples count as arrays and pydantic models as objects. Anything
    unrecognised is treated as a string, matching how it is encoded.
    """
    if value is None:
        return ValueShape.NULL
    if isinstance(value, bool):
        return ValueShape.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueShape.NUMBER
    if isinstance(value, str):
        return ValueShape.STRING
    if isinstance(value, (Mapping, BaseModel)):
        return ValueShape.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueShape.ARRAY
    return ValueShape.STRING
