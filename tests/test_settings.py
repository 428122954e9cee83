import pytest
from pydantic import ValidationError

from ypbank.errors import SettingsError, YPBankError
from ypbank.settings import (
    DEFAULT_MAX_BINARY_BYTES,
    DEFAULT_MAX_TEXT_BYTES,
    CodecSettings,
    load_settings,
)


def test_defaults():
    s = load_settings()
    assert s.max_text_bytes == DEFAULT_MAX_TEXT_BYTES == 10 * 1024 * 1024
    assert s.max_binary_bytes == DEFAULT_MAX_BINARY_BYTES == 100 * 1024 * 1024


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("YPBANK_MAX_TEXT_BYTES", " 2048 ")
    monkeypatch.setenv("YPBANK_MAX_BINARY_BYTES", "4096")
    s = load_settings()
    assert (s.max_text_bytes, s.max_binary_bytes) == (2048, 4096)


def test_blank_environment_value_is_ignored(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("YPBANK_MAX_TEXT_BYTES", "")
    assert load_settings().max_text_bytes == DEFAULT_MAX_TEXT_BYTES


def test_non_integer_environment_value(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("YPBANK_MAX_BINARY_BYTES", "lots")
    with pytest.raises(ValueError, match="YPBANK_MAX_BINARY_BYTES"):
        load_settings()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_text_bytes": 0},
        {"max_binary_bytes": -1},
        {"max_text_bytes": 100, "max_binary_bytes": 50},
        {"max_text_bytes": "100"},
        {"unknown": 1},
    ],
)
def test_invalid_settings(kwargs: dict):
    with pytest.raises(ValidationError):
        CodecSettings(**kwargs)


def test_settings_are_frozen():
    s = CodecSettings()
    with pytest.raises(ValidationError):
        s.max_text_bytes = 1  # type: ignore[misc]


@pytest.mark.parametrize(
    "env",
    [
        {"YPBANK_MAX_BINARY_BYTES": "lots"},
        {"YPBANK_MAX_TEXT_BYTES": "0"},
        {"YPBANK_MAX_TEXT_BYTES": "200", "YPBANK_MAX_BINARY_BYTES": "100"},
    ],
)
def test_bad_environment_raises_codec_error(monkeypatch: pytest.MonkeyPatch, env: dict):
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    with pytest.raises(SettingsError) as ei:
        load_settings()
    assert isinstance(ei.value, YPBankError)
    assert str(ei.value).startswith("invalid configuration:")
