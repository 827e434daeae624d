from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003

import pytest

from facilitator.config import (
    ConfigurationError,
    configure_logging,
    get_database_config,
    get_database_uri,
    get_handler_config,
    get_storage_config,
    level_for_verbosity,
    optional_env_var,
    parse_duplicate_key_policy,
)
from facilitator.config.storage import DEFAULT_DB_FILENAME
from facilitator.domain.handlers import DuplicateKeyPolicy


def test_optional_env_var_treats_blank_values_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")
    assert optional_env_var("EXAMPLE_VAR") is None

    monkeypatch.setenv("EXAMPLE_VAR", " value ")
    assert optional_env_var("EXAMPLE_VAR") == "value"


def test_storage_config_prefers_explicit_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("FACILITATOR_DATA_DIR", str(custom))

    config = get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+aiosqlite:///override.db")

    assert get_database_uri() == "sqlite+aiosqlite:///override.db"


def test_database_uri_defaults_to_sqlite_in_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("FACILITATOR_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_uri()

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+aiosqlite:///{expected_path}"
    assert expected_path.parent.exists()


@pytest.mark.parametrize(("value", "expected"), [("1", True), ("true", True), ("no", False)])
def test_database_echo_flag(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("FACILITATOR_DATABASE_ECHO", value)

    assert get_database_config().echo is expected


def test_handler_config_defaults_to_concurrent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FACILITATOR_DUPLICATE_KEY_POLICY", raising=False)

    assert get_handler_config().duplicate_key_policy is DuplicateKeyPolicy.CONCURRENT


def test_handler_config_reads_policy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FACILITATOR_DUPLICATE_KEY_POLICY", " Serialized ")

    assert get_handler_config().duplicate_key_policy is DuplicateKeyPolicy.SERIALIZED


def test_invalid_duplicate_key_policy_raises() -> None:
    with pytest.raises(ConfigurationError) as exc:
        parse_duplicate_key_policy("sometimes")

    assert "concurrent" in str(exc.value)


@pytest.mark.parametrize(
    ("verbosity", "level"),
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
)
def test_level_for_verbosity(verbosity: int, level: int) -> None:
    assert level_for_verbosity(verbosity) == level


def test_configure_logging_quiets_driver_loggers() -> None:
    configure_logging(level=logging.INFO, force=True)

    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("aiosqlite").level == logging.WARNING
