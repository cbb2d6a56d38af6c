"""
Production surface: the welcome page in QWebEngineView with a QWebChannel bridge.

Import this module before the QApplication is created (QtWebEngine requirement).
"""
from PySide6.QtCore import QUrl
from PySide6.QtWebChannel import QWebChannel
from PySide6.QtWebEngineCore import QWebEngineLoadingInfo, QWebEnginePage, QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QVBoxLayout
from loguru import logger

from welcome_gate.core.language import Language
from welcome_gate.core.protocol import BRIDGE_OBJECT_NAME, BRIDGE_PROTOCOL_VERSION
from welcome_gate.ui.bridge import WelcomeBridge
from welcome_gate.ui.surface import Surface

_CONSOLE_LEVELS = {
    QWebEnginePage.JavaScriptConsoleMessageLevel.InfoMessageLevel: "DEBUG",
    QWebEnginePage.JavaScriptConsoleMessageLevel.WarningMessageLevel: "WARNING",
    QWebEnginePage.JavaScriptConsoleMessageLevel.ErrorMessageLevel: "ERROR",
}


class WelcomePage(QWebEnginePage):
    """Forwards the page's console output to the host log."""

    def javaScriptConsoleMessage(self, level, message, line_number, source_id):
        logger.log(_CONSOLE_LEVELS.get(level, "DEBUG"), f"[page] {message} ({source_id}:{line_number})")


class WebEngineSurface(Surface):
    """Hosts the welcome page and exposes the bridge as `HostInterface`."""

    def __init__(self, bridge: WelcomeBridge, language: Language, parent=None):
        super().__init__(bridge, language, parent)

        self.view = QWebEngineView(self)
        self.page = WelcomePage(self.view)
        self.view.setPage(self.page)

        settings = self.page.settings()
        settings.setAttribute(QWebEngineSettings.WebAttribute.JavascriptEnabled, True)
        settings.setAttribute(QWebEngineSettings.WebAttribute.LocalStorageEnabled, True)
        settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessFileUrls, True)
        settings.setDefaultTextEncoding("utf-8")

        self.channel = QWebChannel(self.page)
        self.channel.registerObject(BRIDGE_OBJECT_NAME, bridge)
        self.page.setWebChannel(self.channel)
        logger.debug(f"Bridge '{BRIDGE_OBJECT_NAME}' registered (protocol v{BRIDGE_PROTOCOL_VERSION})")
        self.page.loadingChanged.connect(self._on_loading_changed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.view)

    def load(self, url: str) -> None:
        logger.info(f"Loading welcome page: {url}")
        self.view.load(QUrl(url))

    def run_script(self, script: str) -> None:
        if self._torn_down:
            return
        self.page.runJavaScript(script)

    def pause(self) -> None:
        if self.page.lifecycleState() == QWebEnginePage.LifecycleState.Active:
            self.page.setLifecycleState(QWebEnginePage.LifecycleState.Frozen)

    def resume(self) -> None:
        if self.page.lifecycleState() != QWebEnginePage.LifecycleState.Active:
            self.page.setLifecycleState(QWebEnginePage.LifecycleState.Active)

    def _on_loading_changed(self, info: QWebEngineLoadingInfo):
        if self._torn_down:
            return
        status = info.status()
        if status == QWebEngineLoadingInfo.LoadStatus.LoadSucceededStatus:
            self.loadFinished.emit(True, "")
        elif status == QWebEngineLoadingInfo.LoadStatus.LoadFailedStatus:
            reason = info.errorString() or f"error {info.errorCode()}"
            logger.error(f"Welcome page failed to load: {reason}")
            self.loadFinished.emit(False, reason)

    def _release(self) -> None:
        self.view.stop()
        self.channel.deregisterObject(self.bridge)
        self.page.setWebChannel(None)
        # The page must go before the view that parents it.
        self.page.deleteLater()
        self.view.deleteLater()
