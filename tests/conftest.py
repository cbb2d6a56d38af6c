import os
import sys

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from welcome_gate.core.errors import StorageFailure
from welcome_gate.core.language import LanguageRegistry
from welcome_gate.core.onboarding import OnboardingStore
from welcome_gate.core.storage import MemoryPreferences


class FlakyPreferences(MemoryPreferences):
    """MemoryPreferences that can be told to fail reads or writes."""

    def __init__(self, namespace: str, initial=None):
        super().__init__(namespace, initial)
        self.fail_read = False
        self.fail_write = False
        self.commits = 0

    def read(self):
        if self.fail_read:
            raise StorageFailure(self.namespace, "read", OSError("disk unavailable"))
        return super().read()

    def commit(self, values):
        if self.fail_write:
            raise StorageFailure(self.namespace, "write", OSError("disk full"))
        self.commits += 1
        super().commit(values)


class StepClock:
    """Deterministic epoch-millis clock."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 0):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture(scope="session")
def qapp():
    """
    Ensure a QApplication exists for tests that use QObjects or widgets.
    """
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    app.setQuitOnLastWindowClosed(False)
    yield app


@pytest.fixture
def onboarding_prefs():
    return FlakyPreferences("onboarding")


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(onboarding_prefs, clock):
    return OnboardingStore(onboarding_prefs, schema_version=1, clock=clock)


@pytest.fixture
def language_prefs():
    return FlakyPreferences("language")


@pytest.fixture
def registry(language_prefs):
    return LanguageRegistry(language_prefs, system_locale=lambda: "en_US")
