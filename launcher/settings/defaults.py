"""Product defaults for settings and app data, and field-level back-fill."""

from __future__ import annotations

import locale
import logging
import os

from launcher.platform_value import Platform, PlatformValue, same_for_all
from launcher.settings.models import AppData, GlobalSettings, QueryHotkey

logger = logging.getLogger(__name__)

LANG_CODE_EN_US = "en_US"
LANG_CODE_ZH_CN = "zh_CN"
DEFAULT_THEME_ID = "e4006bd3-6bfe-4020-8d1c-4c32a8e567e5"


def detect_system_locale() -> str:
    """Best-effort system locale name, e.g. ``zh_CN``; empty when unknown."""
    for env_var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(env_var)
        if value:
            return value.split(".")[0]
    try:
        code, _encoding = locale.getlocale()
    except ValueError:
        logger.debug("Could not read the system locale", exc_info=True)
        return ""
    return code or ""


def is_zh_cn(system_locale: str) -> bool:
    normalized = system_locale.replace("-", "_").lower()
    return normalized.startswith(("zh_cn", "zh_hans", "chinese (simplified)"))


def default_global_settings(system_locale: str | None = None) -> GlobalSettings:
    """Settings for a fresh install, localised for Simplified Chinese systems."""
    if system_locale is None:
        system_locale = detect_system_locale()

    chinese = is_zh_cn(system_locale)

    return GlobalSettings(
        main_hotkey=PlatformValue[str](
            win="alt+space", mac="command+space", linux="ctrl+ctrl"
        ),
        selection_hotkey=PlatformValue[str](
            win="win+alt+space", mac="command+option+space", linux="ctrl+shift+j"
        ),
        use_pin_yin=chinese,
        switch_input_method_abc=chinese,
        show_tray=True,
        hide_on_lost_focus=True,
        lang_code=LANG_CODE_ZH_CN if chinese else LANG_CODE_EN_US,
        query_hotkeys=same_for_all(list[QueryHotkey], []),
        last_query_mode="empty",
        show_position="mouse_screen",
        app_width=800,
        max_result_count=10,
        theme_id=DEFAULT_THEME_ID,
        enable_autostart=same_for_all(bool, False),
        http_proxy_enabled=same_for_all(bool, False),
        http_proxy_url=same_for_all(str, ""),
        custom_python_path=same_for_all(str, ""),
        custom_nodejs_path=same_for_all(str, ""),
        enable_auto_backup=True,
        enable_auto_update=True,
        last_window_x=-1,
        last_window_y=-1,
    )


def default_app_data() -> AppData:
    return AppData()


def apply_setting_defaults(
    settings: GlobalSettings,
    defaults: GlobalSettings,
    os: Platform | None = None,
) -> GlobalSettings:
    """Back-fill fields that an older settings file did not have yet.

    A field counts as missing when it holds its zero value, so an explicit
    empty hotkey or a zero width is reset to the default as well.
    """
    if not settings.main_hotkey.get(os):
        settings.main_hotkey.set(defaults.main_hotkey.get(os), os)
    if not settings.selection_hotkey.get(os):
        settings.selection_hotkey.set(defaults.selection_hotkey.get(os), os)
    if not settings.lang_code:
        settings.lang_code = defaults.lang_code
    if not settings.last_query_mode:
        settings.last_query_mode = defaults.last_query_mode
    if settings.app_width == 0:
        settings.app_width = defaults.app_width
    if settings.max_result_count == 0:
        settings.max_result_count = defaults.max_result_count
    if not settings.theme_id:
        settings.theme_id = defaults.theme_id
    return settings
