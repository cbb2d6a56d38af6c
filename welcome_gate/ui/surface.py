"""
Embedded surfaces that can host the welcome page.

A surface is the widget inside WelcomeScreen that renders the page and
carries the bridge. Two implementations exist:
- WebEngineSurface (web_surface.py): the production page in QWebEngineView.
- SimulatedSurface (here): native stand-in used for previews and tests when
  no page bridge is injected. It drives the very same WelcomeBridge slots, so
  the controller cannot tell the two apart.
"""
from typing import List, Optional

from PySide6.QtCore import QTimer, Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget
from loguru import logger

from welcome_gate.core.language import Language
from welcome_gate.core.onboarding import UserChoice
from welcome_gate.core.strings import text
from welcome_gate.ui.bridge import WelcomeBridge


class Surface(QWidget):
    """
    Surface contract.

    Signals:
        loadFinished(ok, reason): main page finished loading (or failed).
    """
    loadFinished = Signal(bool, str)

    bridge_available = True

    def __init__(self, bridge: WelcomeBridge, language: Language, parent=None):
        super().__init__(parent)
        self.bridge = bridge
        self.language = language
        self._torn_down = False

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    def load(self, url: str) -> None:
        raise NotImplementedError

    def run_script(self, script: str) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        pass

    def resume(self) -> None:
        pass

    def teardown(self) -> bool:
        """Release the surface. Returns False when it was already released."""
        if self._torn_down:
            return False
        self._torn_down = True
        self._release()
        return True

    def _release(self) -> None:
        pass


class SimulatedSurface(Surface):
    """
    Local simulation of the welcome page.

    Renders two native buttons (local / cloud) and a language toggle. Loading
    completes on the next event-loop turn and reports `onPageLoaded` through
    the bridge, like the real page does after its channel is ready.

    Usage:
        surface = SimulatedSurface(bridge, Language.ENGLISH)
        surface.load("about:blank")
        surface.simulate_choice(UserChoice.LOCAL)
    """

    bridge_available = False

    def __init__(self, bridge: WelcomeBridge, language: Language, parent=None,
                 fail_with: Optional[str] = None):
        super().__init__(bridge, language, parent)
        self.fail_with = fail_with
        self.url: Optional[str] = None
        self.scripts: List[str] = []
        self.paused = False
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        self.banner = QLabel(text(self.language, "simulated_banner"))
        self.banner.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.banner)

        title = QLabel(text(self.language, "window_title"))
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)

        buttons = QHBoxLayout()
        self.local_btn = QPushButton(text(self.language, "choose_local"))
        self.local_btn.clicked.connect(lambda: self.simulate_choice(UserChoice.LOCAL))
        buttons.addWidget(self.local_btn)

        self.cloud_btn = QPushButton(text(self.language, "choose_cloud"))
        self.cloud_btn.clicked.connect(lambda: self.simulate_choice(UserChoice.CLOUD))
        buttons.addWidget(self.cloud_btn)
        layout.addLayout(buttons)

        self.language_btn = QPushButton(text(self.language, "switch_language"))
        self.language_btn.clicked.connect(self._toggle_language)
        layout.addWidget(self.language_btn)

    def load(self, url: str) -> None:
        self.url = url
        logger.info(f"Simulated surface loading {url}")
        QTimer.singleShot(0, self._finish_load)

    def _finish_load(self):
        if self._torn_down:
            return
        if self.fail_with:
            self.loadFinished.emit(False, self.fail_with)
            return
        self.loadFinished.emit(True, "")
        self.bridge.onPageLoaded()

    def run_script(self, script: str) -> None:
        if self._torn_down:
            return
        self.scripts.append(script)
        logger.debug(f"Simulated surface script: {script}")

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def simulate_choice(self, choice: UserChoice) -> None:
        if self._torn_down:
            return
        self.bridge.onUserChoice(UserChoice.from_value(choice).value)

    def simulate_language_change(self, code: str) -> None:
        if self._torn_down:
            return
        self.bridge.changeLanguage(code)

    def _toggle_language(self):
        languages = list(Language)
        following = languages[(languages.index(self.language) + 1) % len(languages)]
        self.simulate_language_change(following.code)
