from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from observable_proxy.config import (
    ConfigurationError,
    ObservableConfig,
    get_observable_config,
    read_environment,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_defaults_without_environment() -> None:
    assert get_observable_config() == ObservableConfig()
    assert ObservableConfig().type_name_suffix == "Proxy"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OBSERVABLE_PROXY_TYPE_SUFFIX", "Watched")
    monkeypatch.setenv("OBSERVABLE_PROXY_UNIQUE_TYPE_NAMES", "no")
    monkeypatch.setenv("OBSERVABLE_PROXY_WRAP_HANDLER_ERRORS", "1")

    config = get_observable_config()

    assert config == ObservableConfig(
        type_name_suffix="Watched",
        unique_type_names=False,
        wrap_handler_errors=True,
    )


def test_dotenv_file_is_read(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("OBSERVABLE_PROXY_TYPE_SUFFIX=FromFile\nUNRELATED=1\n")

    assert get_observable_config(env_file=env_file).type_name_suffix == "FromFile"
    assert "UNRELATED" not in read_environment(env_file=env_file)


def test_process_environment_wins_over_dotenv(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("OBSERVABLE_PROXY_WRAP_HANDLER_ERRORS=true\n")
    monkeypatch.setenv("OBSERVABLE_PROXY_WRAP_HANDLER_ERRORS", "false")

    assert get_observable_config(env_file=env_file).wrap_handler_errors is False


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OBSERVABLE_PROXY_TYPE_SUFFIX", "   ")

    assert get_observable_config().type_name_suffix == "Proxy"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("OBSERVABLE_PROXY_UNIQUE_TYPE_NAMES", "sometimes"),
        ("OBSERVABLE_PROXY_TYPE_SUFFIX", "not an identifier"),
        ("OBSERVABLE_PROXY_LOG_LEVEL", "loud"),
    ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name) as exc:
        get_observable_config()

    assert exc.value.variables == (name,)


def test_log_level_is_normalised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OBSERVABLE_PROXY_LOG_LEVEL", " warning ")

    assert get_observable_config().log_level == "WARNING"
