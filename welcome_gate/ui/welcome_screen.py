"""
Welcome Screen - the localized presentation context around the surface.

A screen is built for exactly one language. Changing the language means
destroying the screen and building a new one; anything worth keeping across
that rebuild travels in ScreenState.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QByteArray, QEasingCurve, QPropertyAnimation, QTimer, QUrl, Qt, Signal
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget
from loguru import logger

from welcome_gate.core.errors import BridgeUnavailable
from welcome_gate.core.language import Language
from welcome_gate.core.protocol import BRIDGE_OBJECT_NAME
from welcome_gate.core.strings import text
from welcome_gate.ui.bridge import WelcomeBridge
from welcome_gate.ui.surface import Surface

ASSETS_DIR = Path(__file__).parent / "assets"

SurfaceFactory = Callable[[WelcomeBridge, Language, QWidget], Surface]


def default_page_url(debug: bool = False) -> str:
    url = QUrl.fromLocalFile(str(ASSETS_DIR / "welcome.html"))
    if debug:
        url.setQuery("debug=true")
    return url.toString()


@dataclass
class ScreenState:
    """What survives a screen rebuild."""
    show_animation: bool = True
    geometry: Optional[QByteArray] = None


class Toast(QLabel):
    """Short-lived notification bubble."""

    def __init__(self, message: str, parent: Optional[QWidget] = None, duration_ms: int = 2500):
        super().__init__(message, parent)
        self.setWindowFlags(Qt.ToolTip | Qt.FramelessWindowHint)
        self.setAttribute(Qt.WA_DeleteOnClose)
        self.setStyleSheet(
            "background: rgba(30, 30, 30, 220); color: white; padding: 8px 14px; border-radius: 6px;"
        )
        self.adjustSize()
        QTimer.singleShot(duration_ms, self.close)

    @classmethod
    def show_message(cls, message: str, parent: Optional[QWidget] = None) -> "Toast":
        toast = cls(message, parent)
        if parent is not None and parent.isVisible():
            center = parent.geometry().center()
            toast.move(center.x() - toast.width() // 2, parent.geometry().bottom() - toast.height() - 40)
        toast.show()
        return toast


class WelcomeScreen(QWidget):
    """
    Top-level onboarding window.

    Signals:
        loadFailed(reason): the page could not be loaded.
        closed(): the user closed the window (not emitted for teardown()).
    """
    loadFailed = Signal(str)
    closed = Signal()

    def __init__(self, language: Language, bridge: WelcomeBridge, surface_factory: SurfaceFactory,
                 state: Optional[ScreenState] = None, parent=None):
        super().__init__(parent)
        self.language = language
        self.bridge = bridge
        self.state = state or ScreenState()
        self._torn_down = False
        self._animation = None

        self.setWindowTitle(text(language, "window_title"))
        self.resize(420, 760)
        if self.state.geometry is not None:
            self.restoreGeometry(self.state.geometry)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.surface = surface_factory(bridge, language, self)
        self.surface.loadFinished.connect(self._on_load_finished)
        layout.addWidget(self.surface)

        if not self.surface.bridge_available:
            logger.warning(f"{BridgeUnavailable(BRIDGE_OBJECT_NAME)}; using local simulation")
        logger.debug(f"WelcomeScreen built for '{language.code}' (session {bridge.session_id})")

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    @property
    def bridge_available(self) -> bool:
        return self.surface.bridge_available

    def load(self, url: str) -> None:
        self.surface.load(url)

    def push_language(self, script: str) -> None:
        self.surface.run_script(script)

    def pause(self) -> None:
        self.surface.pause()

    def resume(self) -> None:
        self.surface.resume()

    def notify(self, message: str) -> None:
        Toast.show_message(message, self)

    def save_state(self) -> ScreenState:
        # The entry animation plays once per session, not after a rebuild.
        return ScreenState(show_animation=False, geometry=self.saveGeometry())

    def teardown(self) -> bool:
        """Release the surface and close the window. Idempotent."""
        if self._torn_down:
            return False
        self._torn_down = True
        if self._animation is not None:
            self._animation.stop()
        self.surface.teardown()
        self.close()
        self.deleteLater()
        return True

    def _on_load_finished(self, ok: bool, reason: str):
        if self._torn_down:
            return
        if not ok:
            self.loadFailed.emit(reason)
            return
        if self.state.show_animation:
            self._animate_entry()

    def _animate_entry(self):
        self.setWindowOpacity(0.0)
        self._animation = QPropertyAnimation(self, b"windowOpacity", self)
        self._animation.setDuration(300)
        self._animation.setStartValue(0.0)
        self._animation.setEndValue(1.0)
        self._animation.setEasingCurve(QEasingCurve.OutCubic)
        self._animation.start()

    def closeEvent(self, event):
        if not self._torn_down:
            logger.info("Welcome screen closed by the user")
            self.closed.emit()
        super().closeEvent(event)
