from typing import Any, Optional
import json
import os
from pydantic import BaseModel, Field
from loguru import logger
from .events import Signal

# --- Settings Models ---
class GeneralSettings(BaseModel):
    debug_mode: bool = True
    log_dir: str = "logs"

class StorageSettings(BaseModel):
    state_dir: str = "./data"
    onboarding_file: str = "welcome_config.json"
    language_file: str = "language_settings.json"

class WelcomeSettings(BaseModel):
    schema_version: int = 1
    page_url: Optional[str] = None  # None -> bundled welcome.html
    show_animation: bool = True
    simulate_surface: bool = False  # run without QtWebEngine (preview/debug harness)
    debug_page: bool = False

class LanguageSettings(BaseModel):
    fallback: str = "en"

class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    welcome: WelcomeSettings = Field(default_factory=WelcomeSettings)
    language: LanguageSettings = Field(default_factory=LanguageSettings)

# --- Manager ---
class ConfigManager:
    """
    Manages application configuration with persistence and reactivity.
    """
    def __init__(self, filepath: str = "welcome_gate.json"):
        self.filepath = filepath
        self._data = AppConfig()
        self.on_changed = Signal("ConfigChanged")
        self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if not hasattr(self._data, section):
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        raw = section_obj.model_dump()
        raw[key] = value
        setattr(self._data, section, type(section_obj).model_validate(raw))
        self._save()
        self.on_changed.emit(section, key, getattr(getattr(self._data, section), key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
                return
            except Exception as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
        if not self.filepath.endswith('.toml'):
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if self.filepath.endswith('.toml'):
            logger.warning(f"Config {self.filepath} is TOML; changes are kept in memory only")
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except Exception as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
