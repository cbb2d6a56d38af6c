"""
Welcome Gate Core - Qt-free onboarding domain.

Provides:
- OnboardingStore: persisted first-launch / choice / schema-version record
- decision: should_show_onboarding, resolve_choice, evaluate
- LanguageRegistry: supported languages, total code resolution, change fan-out
- protocol: bridge call table, BridgeSession ordering rules, SessionResult codes
- SessionMachine: host controller phases
- ConfigManager / setup_logging: ambient configuration and logging

Usage:
    from welcome_gate.core import ServiceLocator, evaluate

    services = ServiceLocator("welcome_gate.json")
    verdict = evaluate(services.onboarding.get(), services.schema_version)
"""
from .errors import (
    WelcomeGateError,
    StorageFailure,
    SurfaceLoadFailure,
    BridgeUnavailable,
    SessionError,
)
from .events import Signal
from .config import ConfigManager, AppConfig
from .storage import Preferences, JsonFilePreferences, MemoryPreferences
from .onboarding import OnboardingState, OnboardingStore, UserChoice
from .decision import (
    CURRENT_SCHEMA_VERSION,
    OnboardingVerdict,
    evaluate,
    resolve_choice,
    should_show_onboarding,
)
from .language import Language, LanguageRegistry
from .protocol import BridgeCall, BridgeMessage, BridgeSession, SessionResult
from .session import SessionMachine, SessionPhase
from .locator import ServiceLocator
