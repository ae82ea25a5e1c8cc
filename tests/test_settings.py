from __future__ import annotations

import os

import pytest

from gapline.runtime.settings import ENV_PREFIX, EngineSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


def test_from_env_defaults() -> None:
    settings = EngineSettings.from_env()

    assert settings == EngineSettings()
    assert settings.initial_size == 1024
    assert settings.destination_size == 1024
    assert settings.prompt == b"> "
    assert settings.gap_filler == ord("_")
    assert not settings.gap_debug


def test_from_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("GAPLINE_INIT_SIZE", "16")
    monkeypatch.setenv("GAPLINE_GAP_DEBUG", "yes")
    monkeypatch.setenv("GAPLINE_GAP_FILLER", ".")
    monkeypatch.setenv("GAPLINE_PROMPT", "$ ")
    monkeypatch.setenv("GAPLINE_DEST_SIZE", "32")
    monkeypatch.setenv("GAPLINE_PENDING_TIMEOUT_MS", "250")

    settings = EngineSettings.from_env()

    assert settings.initial_size == 16
    assert settings.gap_debug
    assert settings.gap_filler == ord(".")
    assert settings.prompt == b"$ "
    assert settings.destination_size == 32
    assert settings.pending_timeout_ms == 250


def test_from_env_rejects_bad_integer(monkeypatch) -> None:
    monkeypatch.setenv("GAPLINE_INIT_SIZE", "lots")

    with pytest.raises(ValueError, match="GAPLINE_INIT_SIZE"):
        EngineSettings.from_env()


def test_from_env_rejects_long_filler(monkeypatch) -> None:
    monkeypatch.setenv("GAPLINE_GAP_FILLER", "ab")

    with pytest.raises(ValueError):
        EngineSettings.from_env()


@pytest.mark.parametrize(
    "field, value",
    [
        ("initial_size", 0),
        ("destination_size", -1),
        ("pending_timeout_ms", 0),
        ("gap_filler", 300),
    ],
)
def test_settings_validate_fields(field: str, value: int) -> None:
    with pytest.raises(ValueError):
        EngineSettings(**{field: value})
