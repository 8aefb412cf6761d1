"""Browser collaborator: location, history and navigation events.

The binding layer talks to the address bar through the :class:`Browser`
protocol. :class:`MemoryBrowser` is the in-process implementation used
for headless hosts and tests; a real front-end bridge implements the same
five members.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any, Protocol
from urllib.parse import parse_qsl, quote_plus, urlencode

from pyquerystate.exceptions import BrowserUnavailableError
from pyquerystate.models.location import HistoryEntry, Location

_logger = logging.getLogger(__name__)

PopStateListener = Callable[[HistoryEntry], None]


class Browser(Protocol):
    """Structural browser interface used by bindings.

    Implementations raise :class:`BrowserUnavailableError` from any member
    when the page environment cannot be reached.
    """

    @property
    def location(self) -> Location:
        ...

    def push_state(self, state: dict[str, Any], url: str) -> None:
        ...

    def replace_state(self, state: dict[str, Any], url: str) -> None:
        ...

    def add_popstate_listener(self, listener: PopStateListener) -> None:
        ...

    def remove_popstate_listener(self, listener: PopStateListener) -> None:
        ...


class SearchParams:
    """Ordered, form-urlencoded query parameters.

    Values returned by :meth:`get` are decoded once, exactly like a
    browser's ``URLSearchParams``.
    """

    def __init__(self, search: str = "") -> None:
        if search.startswith("?"):
            search = search[1:]
        self._pairs: list[tuple[str, str]] = parse_qsl(search, keep_blank_values=True)

    def get(self, key: str) -> str | None:
        for name, value in self._pairs:
            if name == key:
                return value
        return None

    def get_all(self, key: str) -> list[str]:
        return [value for name, value in self._pairs if name == key]

    def has(self, key: str) -> bool:
        return any(name == key for name, _ in self._pairs)

    def set(self, key: str, value: str) -> None:
        """Replace the first *key* in place and drop any duplicates."""
        updated: list[tuple[str, str]] = []
        found = False
        for name, current in self._pairs:
            if name != key:
                updated.append((name, current))
            elif not found:
                updated.append((name, value))
                found = True
        if not found:
            updated.append((key, value))
        self._pairs = updated

    def delete(self, key: str) -> None:
        self._pairs = [(name, value) for name, value in self._pairs if name != key]

    def entries(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._pairs))

    def to_string(self) -> str:
        return urlencode(self._pairs, quote_via=quote_plus, safe="*")

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"SearchParams({self.to_string()!r})"


class MemoryBrowser:
    """In-memory session history with popstate dispatch.

    ``push_state`` and ``replace_state`` never fire popstate; ``back``,
    ``forward`` and ``go`` do, mirroring a real browser.
    """

    def __init__(self, url: str = "/") -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(location=Location.from_url(url))]
        self._index = 0
        self._listeners: list[PopStateListener] = []
        self._available = True

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def detach(self) -> None:
        """Make every member raise, as during non-interactive rendering."""
        self._available = False

    def attach(self) -> None:
        self._available = True

    def _ensure_available(self) -> None:
        if not self._available:
            raise BrowserUnavailableError("Browser environment is not available")

    # ------------------------------------------------------------------
    # Browser protocol
    # ------------------------------------------------------------------

    @property
    def location(self) -> Location:
        self._ensure_available()
        return self._entries[self._index].location

    def push_state(self, state: dict[str, Any], url: str) -> None:
        self._ensure_available()
        entry = HistoryEntry(location=Location.from_url(url, base=self.location), state=state)
        # Pushing discards any forward entries.
        del self._entries[self._index + 1 :]
        self._entries.append(entry)
        self._index += 1
        _logger.debug("pushState url=%s (length=%d)", entry.location.href, len(self._entries))

    def replace_state(self, state: dict[str, Any], url: str) -> None:
        self._ensure_available()
        entry = HistoryEntry(location=Location.from_url(url, base=self.location), state=state)
        self._entries[self._index] = entry
        _logger.debug("replaceState url=%s", entry.location.href)

    def add_popstate_listener(self, listener: PopStateListener) -> None:
        self._ensure_available()
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_popstate_listener(self, listener: PopStateListener) -> None:
        self._ensure_available()
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def search_params(self) -> SearchParams:
        return SearchParams(self.location.search)

    def go(self, delta: int) -> None:
        """Traverse *delta* entries; out-of-range or zero moves are ignored."""
        self._ensure_available()
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return
        self._index = target
        entry = self._entries[target]
        _logger.debug("popstate url=%s", entry.location.href)
        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception:
                _logger.warning("popstate listener failed", exc_info=True)

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)

    def navigate(self, url: str) -> None:
        """Simulate the user following a link within the page (pushes, no popstate)."""
        self.push_state({}, url)
