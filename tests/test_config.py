from __future__ import annotations

import pytest

from pyquerystate.config import HistoryMode, QueryStateConfig
from pyquerystate.exceptions import QueryStateConfigError


def test_defaults() -> None:
    config = QueryStateConfig()

    assert config.placeholder_name == "query"
    assert config.history_mode is HistoryMode.PUSH
    assert config.reset_absent_on_mount is False


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYQUERYSTATE_PLACEHOLDER_NAME", "unnamed")
    monkeypatch.setenv("PYQUERYSTATE_HISTORY_MODE", "Replace")
    monkeypatch.setenv("PYQUERYSTATE_RESET_ABSENT_ON_MOUNT", "yes")
    monkeypatch.setenv("PYQUERYSTATE_LOG_VALUE_MAX_LENGTH", "64")

    config = QueryStateConfig.from_env()

    assert config.placeholder_name == "unnamed"
    assert config.history_mode is HistoryMode.REPLACE
    assert config.reset_absent_on_mount is True
    assert config.log_value_max_length == 64


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYQUERYSTATE_RESET_ABSENT_ON_MOUNT", "1")
    monkeypatch.setenv("PYQUERYSTATE_LOG_VALUE_MAX_LENGTH", "not-a-number")

    config = QueryStateConfig.from_env(reset_absent_on_mount=False, log_value_max_length=10)

    assert config.reset_absent_on_mount is False
    assert config.log_value_max_length == 10


def test_invalid_values_raise_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(QueryStateConfigError):
        QueryStateConfig(history_mode="sideways")  # type: ignore[arg-type]
    with pytest.raises(QueryStateConfigError):
        QueryStateConfig(placeholder_name="")

    monkeypatch.setenv("PYQUERYSTATE_LOG_VALUE_MAX_LENGTH", "abc")
    with pytest.raises(QueryStateConfigError):
        QueryStateConfig.from_env()
