"""Local AI provider settings.

Credentials live only in a key-value JSON file on the user's machine. They
are loaded once at session start, written when the user saves, and sent to
the backend only as the provider config of an individual chat turn.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

from backend.app.models.chat import ProviderConfig

logger = logging.getLogger(__name__)

SETTINGS_KEY = "doccraft_ai_settings"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_SETTINGS_PATH = Path.home() / ".doccraft" / "settings.json"

MODEL_CHOICES = [
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4-turbo",
    "gpt-3.5-turbo",
]


class AISettings(BaseModel):
    """Provider credentials and model choice."""

    api_key: str = ""
    base_url: str = ""
    model: str = DEFAULT_MODEL

    def to_provider_config(self) -> ProviderConfig:
        """Per-request provider config; empty values defer to the server."""
        return ProviderConfig(
            api_key=self.api_key or None,
            base_url=self.base_url or None,
            model=self.model or None,
        )


class SettingsStore:
    """JSON key-value file holding the AI settings entry."""

    def __init__(self, path: Path = DEFAULT_SETTINGS_PATH) -> None:
        self.path = path

    def load(self) -> AISettings:
        """Read settings, falling back to defaults when missing or unreadable."""
        try:
            entries = json.loads(self.path.read_text(encoding="utf-8"))
            stored = entries.get(SETTINGS_KEY) if isinstance(entries, dict) else None
            if stored:
                return AISettings.model_validate(stored)
        except FileNotFoundError:
            pass
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load settings: {e}")
        return AISettings()

    def save(self, settings: AISettings) -> bool:
        """Write settings, keeping any other entries in the file.

        Returns:
            True if the file was written
        """
        try:
            entries = {}
            if self.path.exists():
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
                if isinstance(loaded, dict):
                    entries = loaded
            entries[SETTINGS_KEY] = settings.model_dump()

            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save settings: {e}")
            return False
