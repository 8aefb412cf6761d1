"""Keyed reactive store.

The store maps a key to exactly one :class:`Signal`. A signal holds the
current value for that key and fans every write out to its subscribers.
Writes go through :meth:`SignalStore.write` or :meth:`SignalStore.update`
only; there is no setter on the signal itself.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from typing import Any

from pyquerystate._redact import redact_for_log
from pyquerystate.exceptions import QueryStateStoreError
from pyquerystate.state.events import ChangeSource, SignalChange

_logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]
Unsubscribe = Callable[[], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Signal:
    """Shared mutable cell for a single key."""

    __slots__ = ("_key", "_value", "_subscribers", "_tokens", "_version", "_last_change", "_owner")

    def __init__(self, key: str, initial_value: Any, *, owner: SignalStore, created_at: datetime) -> None:
        self._key = key
        self._value = initial_value
        self._subscribers: dict[int, Listener] = {}
        self._tokens = itertools.count()
        self._version = 0
        self._last_change = SignalChange(key=key, source=ChangeSource.INITIAL, version=0, changed_at=created_at)
        self._owner = owner

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> Any:
        return self._value

    @property
    def version(self) -> int:
        """Number of writes applied since creation."""
        return self._version

    @property
    def last_change(self) -> SignalChange:
        return self._last_change

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Signal(key={self._key!r}, value={self._value!r}, version={self._version})"


class SignalStore:
    """Registry of signals keyed by their encoded parameter name.

    Stores are plain objects: create one per application (or per test) and
    pass it to the bindings that should share state.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._signals: dict[str, Signal] = {}

    def get_or_create(self, key: str, initial_value: Any = None) -> Signal:
        """Return the signal for *key*, creating it with *initial_value*.

        The first caller wins: *initial_value* is ignored when the signal
        already exists.
        """
        signal = self._signals.get(key)
        if signal is None:
            signal = Signal(key, initial_value, owner=self, created_at=self._clock())
            self._signals[key] = signal
            _logger.debug("Created signal key=%s value=%s", key, redact_for_log(initial_value))
        return signal

    def get(self, key: str) -> Signal | None:
        return self._signals.get(key)

    def keys(self) -> list[str]:
        return list(self._signals)

    def __contains__(self, key: object) -> bool:
        return key in self._signals

    def __len__(self) -> int:
        return len(self._signals)

    def __iter__(self) -> Iterator[Signal]:
        return iter(list(self._signals.values()))

    def clear(self) -> None:
        """Forget every signal. Existing bindings keep their own references."""
        self._signals.clear()

    def _check_owner(self, signal: Signal) -> None:
        if signal._owner is not self:
            raise QueryStateStoreError(f"Signal {signal.key!r} belongs to a different store")

    def write(self, signal: Signal, new_value: Any, *, source: ChangeSource = ChangeSource.WRITE) -> None:
        """Set the signal's value and notify every current subscriber.

        There is no equality check: writing the same value again still
        notifies, which is what forced reconciliation relies on.
        """
        self._check_owner(signal)
        signal._value = new_value
        signal._version += 1
        signal._last_change = SignalChange(
            key=signal.key,
            source=source,
            version=signal._version,
            changed_at=self._clock(),
        )
        _logger.debug(
            "Signal write key=%s source=%s version=%d value=%s",
            signal.key,
            source,
            signal._version,
            redact_for_log(new_value),
        )
        # Snapshot so listeners added or removed during notification don't
        # change who hears about this write.
        for listener in list(signal._subscribers.values()):
            try:
                listener(new_value)
            except Exception:
                _logger.warning("Subscriber for key=%s failed", signal.key, exc_info=True)

    def update(
        self,
        signal: Signal,
        updater: Callable[[Any], Any],
        *,
        source: ChangeSource = ChangeSource.WRITE,
    ) -> Any:
        """Apply *updater* to the signal's current value and write the result."""
        new_value = updater(signal.value)
        self.write(signal, new_value, source=source)
        return new_value

    def subscribe(self, signal: Signal, listener: Listener) -> Unsubscribe:
        """Register *listener*; the returned callable removes it (idempotently)."""
        self._check_owner(signal)
        token = next(signal._tokens)
        signal._subscribers[token] = listener

        def unsubscribe() -> None:
            signal._subscribers.pop(token, None)

        return unsubscribe


_default_store: SignalStore | None = None


def default_store() -> SignalStore:
    """Return the process-wide store used when no store is passed in."""
    global _default_store
    if _default_store is None:
        _default_store = SignalStore()
    return _default_store
