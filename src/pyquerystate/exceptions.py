"""Custom exception hierarchy for pyquerystate.

None of these are fatal: the binding layer catches them and degrades to a
fallback value. They exist so the individual steps can fail loudly in
isolation and be handled at the seam that knows the fallback.
"""

from __future__ import annotations


class QueryStateError(Exception):
    """Base exception for all pyquerystate errors."""


class QueryStateConfigError(QueryStateError):
    """Invalid configuration value."""


class QueryStateDecodeError(QueryStateError):
    """A raw query value could not be decoded into the requested shape."""

    def __init__(self, message: str, *, raw: str = "") -> None:
        self.raw = raw
        super().__init__(message)


class QueryStateStoreError(QueryStateError):
    """A signal was written through a store that does not own it."""


class BrowserUnavailableError(QueryStateError):
    """Browser APIs are not available (e.g. during server-side rendering).

    Raised by :class:`~pyquerystate.browser.Browser` implementations when
    the location or history cannot be accessed.  The binding catches this
    and skips the URL step, keeping the resolved initial value.
    """
