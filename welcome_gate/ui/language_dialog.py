"""
Language selector dialog for host screens.
"""
from typing import Callable, Optional

from PySide6.QtWidgets import (QDialog, QDialogButtonBox, QListWidget,
                               QListWidgetItem, QVBoxLayout)
from PySide6.QtCore import Qt
from loguru import logger

from welcome_gate.core.errors import StorageFailure
from welcome_gate.core.language import Language, LanguageRegistry
from welcome_gate.core.strings import text


class LanguageSelectorDialog(QDialog):
    """
    Lists the supported languages with the active one pre-selected.
    Confirming a different language persists it and calls `on_selected`.
    """

    def __init__(self, registry: LanguageRegistry,
                 on_selected: Optional[Callable[[Language], None]] = None, parent=None):
        super().__init__(parent)
        self.registry = registry
        self.on_selected = on_selected
        self.current = registry.current()

        self.setWindowTitle(text(self.current, "language_dialog_title"))
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        self.language_list = QListWidget()
        for language in self.registry.supported():
            item = QListWidgetItem(language.display_name)
            item.setData(Qt.UserRole, language.code)
            self.language_list.addItem(item)
            if language is self.current:
                self.language_list.setCurrentItem(item)
        self.language_list.itemDoubleClicked.connect(lambda _item: self.accept())
        layout.addWidget(self.language_list)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.button(QDialogButtonBox.Ok).setText(text(self.current, "dialog_confirm"))
        self.buttons.button(QDialogButtonBox.Cancel).setText(text(self.current, "dialog_cancel"))
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

    def selected_language(self) -> Language:
        item = self.language_list.currentItem()
        if item is None:
            return self.current
        return self.registry.resolve(item.data(Qt.UserRole))

    def accept(self):
        language = self.selected_language()
        if language is not self.current:
            try:
                self.registry.set_language(language)
            except StorageFailure as e:
                logger.error(f"Language change to '{language.code}' failed: {e}")
                super().reject()
                return
            if self.on_selected is not None:
                self.on_selected(language)
        super().accept()
