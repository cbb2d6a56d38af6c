"""
Application context: builds and owns the shared services.

There is no module-level instance; the entry point constructs one
ServiceLocator and passes it (or the services it holds) down.
"""
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .config import ConfigManager
from .language import Language, LanguageRegistry
from .onboarding import OnboardingStore
from .storage import JsonFilePreferences, MemoryPreferences, Preferences


class ServiceLocator:
    """
    Usage:
        services = ServiceLocator("welcome_gate.json")
        services.onboarding.get()
        services.languages.current()
    """

    def __init__(self, config_path: str = "welcome_gate.json",
                 system_locale: Optional[Callable[[], Optional[str]]] = None,
                 in_memory: bool = False):
        self.config = ConfigManager(config_path)
        data = self.config.data

        self.onboarding = OnboardingStore(
            self._preferences("onboarding", data.storage.onboarding_file, in_memory),
            schema_version=data.welcome.schema_version,
        )

        registry_kwargs = {"fallback": Language.from_code(data.language.fallback, fallback=Language.ENGLISH)}
        if system_locale is not None:
            registry_kwargs["system_locale"] = system_locale
        self.languages = LanguageRegistry(
            self._preferences("language", data.storage.language_file, in_memory),
            **registry_kwargs,
        )

        self.config.on_changed.connect(self._on_config_change)

    @property
    def schema_version(self) -> int:
        return self.config.data.welcome.schema_version

    def _preferences(self, namespace: str, filename: str, in_memory: bool) -> Preferences:
        if in_memory:
            return MemoryPreferences(namespace)
        return JsonFilePreferences(namespace, Path(self.config.data.storage.state_dir) / filename)

    def _on_config_change(self, section, key, value):
        if section == "welcome" and key == "schema_version":
            self.onboarding.schema_version = value
            logger.info(f"Welcome schema version is now {value}")
