"""URL synchronization for a single UI binding.

A :class:`QueryBinding` ties one UI element to a query parameter. It
resolves an initial value from the parameters known at render time,
shares a signal with every other binding for the same name, and keeps
that signal in step with the address bar:

* once after the first render, the live URL overrides the initial value;
* on back/forward navigation, the navigated-to URL is written back;
* on :meth:`QueryBinding.set_value`, the new value goes into the signal
  and then into the URL as a new history entry.

The hosting framework calls :meth:`QueryBinding.acquire` when the element
attaches and :meth:`QueryBinding.release` when it detaches.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import Any

from pyquerystate._redact import redact_for_log
from pyquerystate.browser import Browser, SearchParams
from pyquerystate.codec import decode, encode, encode_key, percent_encode
from pyquerystate.config import HistoryMode, QueryStateConfig
from pyquerystate.exceptions import BrowserUnavailableError
from pyquerystate.models.location import HistoryEntry, Location
from pyquerystate.params import InitialParams, get_param_value
from pyquerystate.state.events import ChangeSource
from pyquerystate.state.store import Signal, SignalStore, Unsubscribe, default_store

_logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Any], None]


class BindingState(enum.StrEnum):
    CREATED = "created"
    MOUNTED = "mounted"
    LIVE = "live"
    TORN_DOWN = "torn_down"


def _clears_parameter(value: Any) -> bool:
    """``None``, ``False`` and ``""`` are represented by an absent key."""
    return value is None or value is False or (isinstance(value, str) and value == "")


class QueryBinding:
    """One UI element's handle on a query parameter.

    Usage::

        with QueryBinding("q", request.query, "", store=store, browser=browser) as binding:
            binding.set_value("hello")
            binding.value  # "hello"
    """

    def __init__(
        self,
        name: str,
        initial_params: InitialParams = None,
        default: Any = None,
        *,
        store: SignalStore | None = None,
        browser: Browser | None = None,
        config: QueryStateConfig | None = None,
        on_change: ChangeCallback | None = None,
    ) -> None:
        self._config = config or QueryStateConfig()
        if not name:
            _logger.warning("Query binding created without a name; using %r", self._config.placeholder_name)
            name = self._config.placeholder_name
        self._name = name
        self._key = encode_key(name)
        self._default = default
        self._store = store if store is not None else default_store()
        self._browser = browser
        self._on_change = on_change

        raw = get_param_value(initial_params, self._key)
        initial_value = decode(raw, default)
        self._signal: Signal = self._store.get_or_create(self._key, initial_value)
        self._value = self._signal.value

        self._state = BindingState.CREATED
        self._mounted = False
        self._unsubscribe: Unsubscribe | None = None
        self._popstate_listener: Callable[[HistoryEntry], None] | None = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def key(self) -> str:
        return self._key

    @property
    def default(self) -> Any:
        return self._default

    @property
    def signal(self) -> Signal:
        return self._signal

    @property
    def state(self) -> BindingState:
        return self._state

    @property
    def value(self) -> Any:
        """The binding's local copy, refreshed on every signal write while live."""
        return self._value

    @property
    def debug_label(self) -> str:
        return f"{self._key}: {self._value}"

    def __repr__(self) -> str:
        return f"QueryBinding({self.debug_label!r}, state={self._state})"

    def _log_value(self, value: Any) -> Any:
        return redact_for_log(value, max_string=self._config.log_value_max_length)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def acquire(self) -> QueryBinding:
        """Attach: subscribe, reconcile with the live URL, listen for navigation."""
        if self._state in (BindingState.MOUNTED, BindingState.LIVE):
            return self

        self._unsubscribe = self._store.subscribe(self._signal, self._on_signal)
        # The signal may have moved on while this binding was detached.
        if self._signal.value is not self._value:
            self._set_local(self._signal.value)

        self.mount()
        self._state = BindingState.MOUNTED

        if self._browser is not None:
            listener = self._on_popstate
            try:
                self._browser.add_popstate_listener(listener)
            except BrowserUnavailableError:
                _logger.debug("No browser for key=%s; navigation listener skipped", self._key)
            else:
                self._popstate_listener = listener
        self._state = BindingState.LIVE
        return self

    def mount(self) -> None:
        """Reconcile the signal with the live URL. Runs at most once."""
        if self._mounted:
            return
        self._mounted = True
        try:
            raw = self._read_live_param()
        except BrowserUnavailableError:
            _logger.debug("No browser for key=%s; keeping resolved value", self._key)
            return

        if raw is None:
            if self._config.reset_absent_on_mount:
                self._store.write(self._signal, self._default, source=ChangeSource.MOUNT)
            return
        self._store.write(self._signal, decode(raw, self._default), source=ChangeSource.MOUNT)

    def release(self) -> None:
        """Detach: drop the subscription and navigation listener. Idempotent."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._popstate_listener is not None and self._browser is not None:
            try:
                self._browser.remove_popstate_listener(self._popstate_listener)
            except BrowserUnavailableError:
                _logger.debug("No browser for key=%s; navigation listener already gone", self._key)
        self._popstate_listener = None
        self._state = BindingState.TORN_DOWN

    def __enter__(self) -> QueryBinding:
        return self.acquire()

    def __exit__(self, *exc: Any) -> None:
        self.release()

    # ------------------------------------------------------------------
    # Change sources
    # ------------------------------------------------------------------

    def _read_live_param(self) -> str | None:
        if self._browser is None:
            raise BrowserUnavailableError("No browser attached")
        return SearchParams(self._browser.location.search).get(self._key)

    def _set_local(self, value: Any) -> None:
        self._value = value
        if self._on_change is not None:
            self._on_change(value)

    def _on_signal(self, value: Any) -> None:
        self._set_local(value)

    def _on_popstate(self, entry: HistoryEntry) -> None:
        raw = SearchParams(entry.location.search).get(self._key)
        value = decode(raw, self._default)
        _logger.debug("Navigation key=%s value=%s", self._key, self._log_value(value))
        self._store.write(self._signal, value, source=ChangeSource.NAVIGATION)

    def set_value(self, value: Any | Callable[[Any], Any]) -> Any:
        """Write a literal value, or an updater applied to the signal's current value.

        The updater sees the authoritative signal value, not this binding's
        local copy. Returns the value written.
        """
        if callable(value):
            next_value = self._store.update(self._signal, value)
        else:
            next_value = value
            self._store.write(self._signal, next_value)
        self._write_url(next_value)
        return next_value

    def _write_url(self, value: Any) -> None:
        if self._browser is None:
            _logger.debug("No browser for key=%s; URL left unchanged", self._key)
            return
        try:
            location = self._browser.location
            params = SearchParams(location.search)
            if _clears_parameter(value):
                params.delete(self._key)
            else:
                params.set(self._key, percent_encode(encode(value)))
            url = Location(pathname=location.pathname, search=params.to_string()).href
            if self._config.history_mode is HistoryMode.REPLACE:
                self._browser.replace_state({}, url)
            else:
                self._browser.push_state({}, url)
        except BrowserUnavailableError:
            _logger.debug("No browser for key=%s; URL left unchanged", self._key)
