"""Unit tests for the local AI settings store."""

import json
from pathlib import Path

import pytest

from ui.settings_store import DEFAULT_MODEL, SETTINGS_KEY, AISettings, SettingsStore


@pytest.fixture
def store(tmp_path: Path) -> SettingsStore:
    """Settings store backed by a temporary file."""
    return SettingsStore(tmp_path / "settings.json")


def test_missing_file_gives_defaults(store: SettingsStore) -> None:
    """Test that a fresh install starts with empty credentials and the default model."""
    settings = store.load()

    assert settings == AISettings(api_key="", base_url="", model=DEFAULT_MODEL)
    assert DEFAULT_MODEL == "gpt-4o"


def test_save_then_load(store: SettingsStore) -> None:
    """Test that saved settings are read back."""
    saved = AISettings(api_key="sk-test", base_url="https://llm.example/v1", model="gpt-4o-mini")

    assert store.save(saved) is True

    assert store.load() == saved


def test_save_keeps_other_entries(store: SettingsStore) -> None:
    """Test that unrelated keys in the file survive a save."""
    store.path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

    store.save(AISettings(api_key="k"))

    entries = json.loads(store.path.read_text(encoding="utf-8"))
    assert entries["theme"] == "dark"
    assert entries[SETTINGS_KEY]["api_key"] == "k"


def test_corrupt_file_gives_defaults(store: SettingsStore) -> None:
    """Test that an unreadable file does not break startup."""
    store.path.write_text("{not json", encoding="utf-8")

    assert store.load() == AISettings()


def test_provider_config_sends_empty_values_as_unset() -> None:
    """Test that blank settings defer to the server configuration."""
    config = AISettings(api_key="", base_url="", model="gpt-4o").to_provider_config()

    assert config.api_key is None
    assert config.base_url is None
    assert config.model == "gpt-4o"
