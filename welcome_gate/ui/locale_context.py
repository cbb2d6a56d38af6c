"""
Applies a Language to the Qt UI context.

Must run before a screen and its surface are constructed: widgets and the
bridge read the locale when they are built and do not follow later changes.
"""
from PySide6.QtCore import QLocale, Qt
from PySide6.QtWidgets import QApplication
from loguru import logger

from welcome_gate.core.language import Language


def apply_language(language: Language) -> QLocale:
    qlocale = QLocale(language.qt_locale_name)
    QLocale.setDefault(qlocale)

    app = QApplication.instance()
    if isinstance(app, QApplication):
        direction = Qt.RightToLeft if qlocale.textDirection() == Qt.RightToLeft else Qt.LeftToRight
        app.setLayoutDirection(direction)

    logger.debug(f"UI locale set to {qlocale.name()} for '{language.code}'")
    return qlocale


def system_locale_name() -> str:
    """System locale as seen by Qt, e.g. 'zh_CN'."""
    return QLocale.system().name()
