"""
Language selector dialog and the mode windows that use it.
"""
from unittest.mock import MagicMock

from PySide6.QtWidgets import QDialog
from welcome_gate.core.language import Language
from welcome_gate.core.onboarding import UserChoice
from welcome_gate.ui.language_dialog import LanguageSelectorDialog
from welcome_gate.ui.mode_window import ModeWindow


def test_lists_supported_languages(qapp, registry):
    dialog = LanguageSelectorDialog(registry)

    assert dialog.language_list.count() == 2
    assert dialog.language_list.item(0).text() == "中文"
    assert dialog.language_list.currentItem().text() == "English"
    assert dialog.windowTitle() == "Select language"
    assert dialog.selected_language() is Language.ENGLISH


def test_confirming_new_language_persists(qapp, registry, language_prefs):
    on_selected = MagicMock()
    dialog = LanguageSelectorDialog(registry, on_selected=on_selected)

    dialog.language_list.setCurrentRow(0)
    dialog.accept()

    assert dialog.result() == QDialog.Accepted
    assert registry.current() is Language.CHINESE
    assert language_prefs.read() == {"current_language": "zh"}
    on_selected.assert_called_once_with(Language.CHINESE)


def test_confirming_current_language_is_noop(qapp, registry, language_prefs):
    on_selected = MagicMock()
    dialog = LanguageSelectorDialog(registry, on_selected=on_selected)

    dialog.accept()

    assert dialog.result() == QDialog.Accepted
    assert language_prefs.commits == 0
    on_selected.assert_not_called()


def test_storage_failure_rejects(qapp, registry, language_prefs):
    language_prefs.fail_write = True
    dialog = LanguageSelectorDialog(registry)

    dialog.language_list.setCurrentRow(0)
    dialog.accept()

    assert dialog.result() == QDialog.Rejected
    assert registry.current() is Language.ENGLISH


def test_mode_window_follows_language(qapp, registry):
    window = ModeWindow(UserChoice.LOCAL, registry)
    window.show()
    assert window.windowTitle() == "Local Digital Human"
    assert len(registry.on_language_changed) == 1

    registry.set_language(Language.CHINESE)
    assert window.windowTitle() == "本地数字人"

    window.close()
    assert len(registry.on_language_changed) == 0


def test_cloud_mode_window_title(qapp, registry):
    window = ModeWindow(UserChoice.CLOUD, registry)
    assert window.windowTitle() == "Cloud Digital Human"
    window.close()
