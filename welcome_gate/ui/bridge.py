from PySide6.QtCore import QObject, Slot, Signal
from loguru import logger


class WelcomeBridge(QObject):
    """
    Bridge between the welcome page and the host.

    Registered on the page's QWebChannel as `HostInterface`. Slots may be
    invoked from the web engine's side of the boundary, so they never touch
    host state directly: each one re-emits a signal, tagged with the page
    session it belongs to, that the controller receives through a queued
    connection on the UI thread.
    """

    # Signals: (session_id, ...)
    userChoiceReported = Signal(int, str)
    pageLoadReported = Signal(int)
    languageChangeRequested = Signal(int, str)

    def __init__(self, language_code: str, session_id: int = 0, parent=None):
        super().__init__(parent)
        self.session_id = session_id
        self._language_code = language_code

    def set_language_code(self, code: str) -> None:
        """Update the cached answer for getCurrentLanguage (UI thread only)."""
        self._language_code = code

    @Slot(str)
    def onUserChoice(self, choice: str):
        logger.debug(f"Bridge[{self.session_id}] <- onUserChoice({choice!r})")
        self.userChoiceReported.emit(self.session_id, choice)

    @Slot()
    def onPageLoaded(self):
        logger.debug(f"Bridge[{self.session_id}] <- onPageLoaded()")
        self.pageLoadReported.emit(self.session_id)

    @Slot(result=str)
    def getCurrentLanguage(self) -> str:
        return self._language_code

    @Slot(str)
    def changeLanguage(self, code: str):
        logger.debug(f"Bridge[{self.session_id}] <- changeLanguage({code!r})")
        self.languageChangeRequested.emit(self.session_id, code)

    @Slot(str)
    def onLanguageChanged(self, code: str):
        """Legacy name used by older pages."""
        self.changeLanguage(code)
