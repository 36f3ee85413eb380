"""Tests for environment settings and logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from src.config.logging import configure_logging
from src.config.settings import Settings, load_settings

_ENV_VARS = ("HOST", "PORT", "UPSTREAM_TIMEOUT_S", "MAX_BODY_BYTES", "LOG_LEVEL")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's local `.env` out of the tests.
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.upstream_timeout_s is None
    assert settings.max_body_bytes == 1024 * 1024
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_S", "2.5")

    settings = load_settings()
    assert settings.port == 9000
    assert settings.upstream_timeout_s == 2.5


def test_reads_dotenv_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("HOST=127.0.0.1\nMAX_BODY_BYTES=10\n", encoding="utf-8")

    settings = Settings()
    assert settings.host == "127.0.0.1"
    assert settings.max_body_bytes == 10


@pytest.mark.parametrize(
    ("name", "value"),
    [("PORT", "70000"), ("UPSTREAM_TIMEOUT_S", "0"), ("MAX_BODY_BYTES", "-1"), ("PORT", "abc")],
)
def test_invalid_values_raise_runtime_error(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError, match="Invalid environment configuration"):
        load_settings()


def test_configure_logging_quiets_http_client() -> None:
    configure_logging("debug")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
