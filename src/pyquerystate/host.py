"""Host facade and the ``use_query_state`` entry point."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyquerystate.binding import BindingState, ChangeCallback, QueryBinding
from pyquerystate.browser import Browser
from pyquerystate.config import QueryStateConfig
from pyquerystate.params import InitialParams
from pyquerystate.state.store import SignalStore, default_store

_logger = logging.getLogger(__name__)

Setter = Callable[[Any], Any]


class QueryStateHost:
    """Owns the store and browser shared by a page's bindings.

    Usage::

        with QueryStateHost(browser=MemoryBrowser("/search")) as host:
            query, set_query = host.use_query_state("q", request.query, "")
            set_query("hello")

    Leaving the block releases every binding the host created. Without a
    browser the host behaves like a non-interactive render: values resolve
    from the initial parameters and URL updates are skipped.
    """

    def __init__(
        self,
        config: QueryStateConfig | None = None,
        *,
        store: SignalStore | None = None,
        browser: Browser | None = None,
    ) -> None:
        self._config = config or QueryStateConfig()
        self._store = store if store is not None else default_store()
        self._browser = browser
        self._bindings: list[QueryBinding] = []
        # Bindings handed out by use_query_state, reused on every later call
        # with the same name and change callback.
        self._hooks: list[tuple[str, ChangeCallback | None, QueryBinding]] = []

    @property
    def config(self) -> QueryStateConfig:
        return self._config

    @property
    def store(self) -> SignalStore:
        return self._store

    @property
    def browser(self) -> Browser | None:
        return self._browser

    @property
    def bindings(self) -> list[QueryBinding]:
        return list(self._bindings)

    def __enter__(self) -> QueryStateHost:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def bind(
        self,
        name: str,
        initial_params: InitialParams = None,
        default: Any = None,
        *,
        on_change: ChangeCallback | None = None,
    ) -> QueryBinding:
        """Create and acquire a binding tracked by this host."""
        binding = QueryBinding(
            name,
            initial_params,
            default,
            store=self._store,
            browser=self._browser,
            config=self._config,
            on_change=on_change,
        )
        self._bindings.append(binding)
        return binding.acquire()

    def use_query_state(
        self,
        name: str,
        initial_params: InitialParams = None,
        default: Any = None,
        *,
        on_change: ChangeCallback | None = None,
    ) -> tuple[Any, Setter]:
        """Return ``(current_value, set_value)`` for *name*.

        ``set_value`` accepts a literal or an updater function. Calling this
        again with the same *name* and *on_change* (as a re-render does)
        reuses the live binding instead of attaching another one, so pass a
        stable callable rather than a fresh lambda. The binding stays live
        until :meth:`release` or :meth:`close`.
        """
        binding = self._find_hook(name, on_change)
        if binding is None or binding.state is not BindingState.LIVE:
            if binding is not None:
                self.unbind(binding)
            binding = self.bind(name, initial_params, default, on_change=on_change)
            self._hooks.append((name, on_change, binding))
        return binding.value, binding.set_value

    def _find_hook(self, name: str, on_change: ChangeCallback | None) -> QueryBinding | None:
        # Callables may be unhashable bound methods, so match by equality.
        for hook_name, hook_callback, binding in self._hooks:
            if hook_name == name and hook_callback == on_change:
                return binding
        return None

    def release(self, name: str, *, on_change: ChangeCallback | None = None) -> None:
        """Detach the binding :meth:`use_query_state` created for *name*."""
        binding = self._find_hook(name, on_change)
        if binding is not None:
            self.unbind(binding)

    def unbind(self, binding: QueryBinding) -> None:
        binding.release()
        if binding in self._bindings:
            self._bindings.remove(binding)
        self._hooks = [hook for hook in self._hooks if hook[2] is not binding]

    def close(self) -> None:
        """Release every binding created through this host."""
        _logger.debug("Releasing %d binding(s)", len(self._bindings))
        for binding in self._bindings:
            binding.release()
        self._bindings.clear()
        self._hooks.clear()


_default_host: QueryStateHost | None = None


def default_host() -> QueryStateHost:
    """Return the lazily created host used by :func:`use_query_state`."""
    global _default_host
    if _default_host is None:
        _default_host = QueryStateHost()
    return _default_host


def use_query_state(
    name: str,
    initial_params: InitialParams = None,
    default: Any = None,
    *,
    host: QueryStateHost | None = None,
    on_change: ChangeCallback | None = None,
) -> tuple[Any, Setter]:
    """Bind *name* to the query string and return ``(value, set_value)``."""
    return (host or default_host()).use_query_state(name, initial_params, default, on_change=on_change)


def release_query_state(
    name: str,
    *,
    host: QueryStateHost | None = None,
    on_change: ChangeCallback | None = None,
) -> None:
    """Detach the binding :func:`use_query_state` attached for *name*."""
    (host or default_host()).release(name, on_change=on_change)
