"""Runtime configuration for pyquerystate."""

from __future__ import annotations

import dataclasses
import enum
import os
from typing import Any

from pyquerystate.exceptions import QueryStateConfigError


class HistoryMode(enum.StrEnum):
    """How a programmatic write is recorded in the browser history."""

    PUSH = "push"
    REPLACE = "replace"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class QueryStateConfig:
    """Binding configuration.

    Parameters
    ----------
    placeholder_name : str
        Name substituted when a binding is created with an empty name.
    history_mode : HistoryMode
        ``PUSH`` makes every programmatic write a distinct history entry.
        ``REPLACE`` rewrites the current entry instead.
    reset_absent_on_mount : bool
        When the key is missing from the live URL at mount time, write the
        default value back into the signal instead of keeping the value
        resolved from the initial parameters.
    log_value_max_length : int
        Values longer than this are truncated in debug logs.
    """

    placeholder_name: str = "query"
    history_mode: HistoryMode = HistoryMode.PUSH
    reset_absent_on_mount: bool = False
    log_value_max_length: int = 256

    def __post_init__(self) -> None:
        if not self.placeholder_name:
            raise QueryStateConfigError("placeholder_name must be non-empty")
        if not isinstance(self.history_mode, HistoryMode):
            try:
                object.__setattr__(self, "history_mode", HistoryMode(str(self.history_mode).strip().lower()))
            except ValueError as exc:
                raise QueryStateConfigError(f"Unknown history mode: {self.history_mode!r}") from exc
        if self.log_value_max_length <= 0:
            raise QueryStateConfigError("log_value_max_length must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> QueryStateConfig:
        """Create configuration from environment variables.

        Reads ``PYQUERYSTATE_PLACEHOLDER_NAME``, ``PYQUERYSTATE_HISTORY_MODE``,
        ``PYQUERYSTATE_RESET_ABSENT_ON_MOUNT`` and
        ``PYQUERYSTATE_LOG_VALUE_MAX_LENGTH``. Explicit keyword arguments
        override environment values.

        Raises
        ------
        QueryStateConfigError
            If a numeric variable cannot be parsed or the history mode is
            unknown.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        placeholder = env.get("PYQUERYSTATE_PLACEHOLDER_NAME")
        if placeholder is not None:
            config_kwargs["placeholder_name"] = placeholder

        mode = env.get("PYQUERYSTATE_HISTORY_MODE")
        if mode is not None:
            config_kwargs["history_mode"] = mode

        if "reset_absent_on_mount" not in overrides:
            config_kwargs["reset_absent_on_mount"] = _env_bool(
                env.get("PYQUERYSTATE_RESET_ABSENT_ON_MOUNT"),
                False,
            )

        max_len_env = env.get("PYQUERYSTATE_LOG_VALUE_MAX_LENGTH")
        if max_len_env is not None and "log_value_max_length" not in overrides:
            try:
                config_kwargs["log_value_max_length"] = int(max_len_env)
            except ValueError as exc:
                raise QueryStateConfigError(
                    f"PYQUERYSTATE_LOG_VALUE_MAX_LENGTH must be an integer, got {max_len_env!r}"
                ) from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
