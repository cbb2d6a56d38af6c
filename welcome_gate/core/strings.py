"""
Host-side localized strings.

Strings are looked up when a screen is built; a screen that is already
on display keeps the text it was built with until it is reconstructed.
"""
from .language import Language

HOST_STRINGS = {
    Language.CHINESE: {
        "window_title": "索灵数字人",
        "load_failed": "页面加载失败: {reason}",
        "save_failed": "无法保存您的选择，请重试",
        "language_changed": "语言已切换",
        "language_save_failed": "无法保存语言设置",
        "language_dialog_title": "选择语言",
        "dialog_confirm": "确定",
        "dialog_cancel": "取消",
        "simulated_banner": "预览模式（未连接页面桥接）",
        "choose_local": "本地数字人",
        "choose_cloud": "云端数字人",
        "switch_language": "切换语言",
        "local_mode_title": "本地数字人",
        "cloud_mode_title": "云端数字人",
        "mode_ready": "已进入{mode}模式",
    },
    Language.ENGLISH: {
        "window_title": "Suoling Digital Human",
        "load_failed": "Failed to load page: {reason}",
        "save_failed": "Your choice could not be saved, please try again",
        "language_changed": "Language changed",
        "language_save_failed": "Language setting could not be saved",
        "language_dialog_title": "Select language",
        "dialog_confirm": "OK",
        "dialog_cancel": "Cancel",
        "simulated_banner": "Preview mode (page bridge not connected)",
        "choose_local": "Local Digital Human",
        "choose_cloud": "Cloud Digital Human",
        "switch_language": "Switch language",
        "local_mode_title": "Local Digital Human",
        "cloud_mode_title": "Cloud Digital Human",
        "mode_ready": "{mode} mode is ready",
    },
}


def text(language: Language, key: str, **kwargs) -> str:
    """Localized string for `key`; falls back to English, then to the key itself."""
    table = HOST_STRINGS.get(language, HOST_STRINGS[Language.ENGLISH])
    template = table.get(key) or HOST_STRINGS[Language.ENGLISH].get(key, key)
    return template.format(**kwargs) if kwargs else template
