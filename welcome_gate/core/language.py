"""
Language Registry - supported languages, resolution and change fan-out.

Resolution is total: every input string maps to a supported Language.
Order of attempts:
    1. exact code ("zh", "EN")
    2. exact locale tag ("zh-CN", "zh_cn")
    3. primary subtag ("zh-TW" -> zh, "en_GB" -> en), preferring a matching region
    4. system language (same rules applied to the system locale)
    5. configured fallback descriptor
"""
from enum import Enum
from typing import Callable, List, Optional
import locale
import threading

from loguru import logger

from .errors import StorageFailure
from .events import Signal
from .storage import Preferences

KEY_LANGUAGE = "current_language"


def canonicalize(code) -> str:
    if not isinstance(code, str):
        return ""
    return code.strip().replace("_", "-").split(".")[0].lower()


def primary_subtag(code: str) -> str:
    return canonicalize(code).split("-")[0]


class Language(Enum):
    """Supported languages, in the order they are offered to the user."""
    CHINESE = ("zh", "中文", "zh-CN")
    ENGLISH = ("en", "English", "en")

    def __init__(self, code: str, display_name: str, locale_tag: str):
        self.code = code
        self.display_name = display_name
        self.locale_tag = locale_tag

    @property
    def qt_locale_name(self) -> str:
        return self.locale_tag.replace("-", "_")

    @classmethod
    def match(cls, code) -> Optional["Language"]:
        """Best supported match for `code`, or None when nothing fits."""
        canonical = canonicalize(code)
        if not canonical:
            return None

        for language in cls:
            if language.code == canonical or language.locale_tag.lower() == canonical:
                return language

        primary = canonical.split("-")[0]
        family = [language for language in cls if language.code == primary]
        if not family:
            return None
        for language in family:
            if canonical.startswith(language.locale_tag.lower()):
                return language
        return family[0]

    @classmethod
    def from_code(cls, code, system_locale: Optional[str] = None,
                  fallback: Optional["Language"] = None) -> "Language":
        """Total lookup: never raises, never returns None."""
        return (cls.match(code)
                or cls.match(system_locale)
                or fallback
                or cls.ENGLISH)


def _default_system_locale() -> Optional[str]:
    try:
        return locale.getlocale()[0]
    except ValueError:
        return None


class LanguageRegistry:
    """
    Owns the active language.

    Constructed once per process and handed to every component that needs it.
    The active language is read lazily from the language namespace on first
    access (system locale when nothing is stored) and cached afterwards.

    Usage:
        registry = LanguageRegistry(JsonFilePreferences("language", path))
        registry.register_listener(on_language_changed)
        registry.set_language(Language.ENGLISH)
    """

    def __init__(self, prefs: Preferences,
                 system_locale: Callable[[], Optional[str]] = _default_system_locale,
                 fallback: Language = Language.ENGLISH):
        self._prefs = prefs
        self._system_locale = system_locale
        self._fallback = fallback
        self._current: Optional[Language] = None
        self._lock = threading.RLock()
        self.on_language_changed = Signal("LanguageChanged")

    def set_system_locale_provider(self, provider: Callable[[], Optional[str]]) -> None:
        self._system_locale = provider

    def supported(self) -> List[Language]:
        return list(Language)

    def system_language(self) -> Language:
        return Language.match(self._system_locale()) or self._fallback

    def resolve(self, code) -> Language:
        language = Language.from_code(code, self._system_locale(), self._fallback)
        if language.code != primary_subtag(code):
            logger.debug(f"Language code {code!r} resolved to {language.code}")
        return language

    def current(self) -> Language:
        with self._lock:
            if self._current is None:
                self._current = self._load()
            return self._current

    def set_language(self, language: Language) -> Language:
        """
        Persist `language` and notify every listener once.

        StorageFailure propagates before any listener is called.
        """
        if not isinstance(language, Language):
            language = self.resolve(language)

        with self._lock:
            self._prefs.commit({KEY_LANGUAGE: language.code})
            self._current = language

        logger.info(f"Language set to {language.code}")
        self.on_language_changed.emit(language)
        return language

    def register_listener(self, listener: Callable[[Language], None]) -> None:
        self.on_language_changed.connect(listener)

    def unregister_listener(self, listener: Callable[[Language], None]) -> None:
        self.on_language_changed.disconnect(listener)

    def _load(self) -> Language:
        try:
            record = self._prefs.read() or {}
        except StorageFailure as e:
            logger.warning(f"Language preference unreadable, using system language: {e}")
            record = {}

        stored = record.get(KEY_LANGUAGE)
        if stored is None:
            language = self.system_language()
            logger.debug(f"No stored language, system language is {language.code}")
            return language
        return self.resolve(stored)
