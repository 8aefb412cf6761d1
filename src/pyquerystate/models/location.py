"""Browser location and history entry models."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Location(BaseModel):
    """The path and query portion of the address bar.

    ``search`` is stored without the leading ``?``.
    """

    model_config = ConfigDict(frozen=True)

    pathname: str = "/"
    search: str = ""

    @field_validator("pathname")
    @classmethod
    def _ensure_leading_slash(cls, value: str) -> str:
        if not value.startswith("/"):
            return f"/{value}"
        return value

    @field_validator("search")
    @classmethod
    def _strip_question_mark(cls, value: str) -> str:
        return value[1:] if value.startswith("?") else value

    @property
    def href(self) -> str:
        """``<path>[?<query>]``, omitting ``?`` when the query is empty."""
        return f"{self.pathname}?{self.search}" if self.search else self.pathname

    @classmethod
    def from_url(cls, url: str, *, base: Location | None = None) -> Location:
        """Parse a (relative or absolute) URL into a :class:`Location`.

        A URL without a path keeps the *base* path, like a browser resolving
        ``?a=1`` against the current page.
        """
        parts = urlsplit(url)
        pathname = parts.path
        if not pathname:
            pathname = base.pathname if base is not None else "/"
        return cls(pathname=pathname, search=parts.query)


class HistoryEntry(BaseModel):
    """One entry of the session history stack."""

    model_config = ConfigDict(frozen=True)

    location: Location
    state: dict[str, Any] = Field(default_factory=dict)
