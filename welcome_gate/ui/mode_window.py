"""
Placeholder destination windows for the LOCAL and CLOUD modes.

Each window listens for language changes and rebuilds its widgets, the
same destroy-and-recreate rule the welcome screen follows.
"""
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from welcome_gate.core.language import Language, LanguageRegistry
from welcome_gate.core.onboarding import UserChoice
from welcome_gate.core.strings import text
from welcome_gate.ui.language_dialog import LanguageSelectorDialog
from welcome_gate.ui.locale_context import apply_language


class ModeWindow(QWidget):
    def __init__(self, choice: UserChoice, registry: LanguageRegistry, parent=None):
        super().__init__(parent)
        self.choice = choice
        self.registry = registry
        self._content = None
        self.setLayout(QVBoxLayout())
        self.resize(480, 320)

        self._build(registry.current())
        registry.register_listener(self._on_language_changed)

    def _build(self, language: Language):
        apply_language(language)
        title_key = "local_mode_title" if self.choice is UserChoice.LOCAL else "cloud_mode_title"
        title = text(language, title_key)
        self.setWindowTitle(title)

        content = QWidget(self)
        layout = QVBoxLayout(content)
        label = QLabel(text(language, "mode_ready", mode=title))
        label.setAlignment(Qt.AlignCenter)
        layout.addWidget(label)
        switch_btn = QPushButton(text(language, "switch_language"))
        switch_btn.clicked.connect(self.open_language_dialog)
        layout.addWidget(switch_btn)

        if self._content is not None:
            self.layout().removeWidget(self._content)
            self._content.deleteLater()
        self._content = content
        self.layout().addWidget(content)

    def open_language_dialog(self):
        LanguageSelectorDialog(self.registry, parent=self).exec()

    def _on_language_changed(self, language: Language):
        self._build(language)

    def closeEvent(self, event):
        self.registry.unregister_listener(self._on_language_changed)
        super().closeEvent(event)
