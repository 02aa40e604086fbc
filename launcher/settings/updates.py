"""Validation and mutation for every setting that can be changed by key.

Each ``SettingKey`` maps to a parse step (validation plus any external check
that must succeed first), an apply step that mutates the settings, and an
optional side effect run after the mutation. Parsing happens before any
mutation, so a rejected value leaves the settings untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import TypeAdapter

from launcher.errors import HotkeyUnavailableError, UnknownSettingError
from launcher.settings.collaborators import Collaborators
from launcher.settings.models import (
    AIProvider,
    GlobalSettings,
    QueryHotkey,
    QueryShortcut,
)


class SettingKey(StrEnum):
    """Keys accepted by ``SettingsManager.update_setting``."""

    MAIN_HOTKEY = "MainHotkey"
    SELECTION_HOTKEY = "SelectionHotkey"
    HTTP_PROXY_ENABLED = "HttpProxyEnabled"
    HTTP_PROXY_URL = "HttpProxyUrl"
    ENABLE_AUTOSTART = "EnableAutostart"
    USE_PIN_YIN = "UsePinYin"
    SWITCH_INPUT_METHOD_ABC = "SwitchInputMethodABC"
    HIDE_ON_START = "HideOnStart"
    HIDE_ON_LOST_FOCUS = "HideOnLostFocus"
    SHOW_TRAY = "ShowTray"
    ENABLE_AUTO_BACKUP = "EnableAutoBackup"
    ENABLE_AUTO_UPDATE = "EnableAutoUpdate"
    LANG_CODE = "LangCode"
    LAST_QUERY_MODE = "LastQueryMode"
    THEME_ID = "ThemeId"
    SHOW_POSITION = "ShowPosition"
    CUSTOM_PYTHON_PATH = "CustomPythonPath"
    CUSTOM_NODEJS_PATH = "CustomNodejsPath"
    APP_WIDTH = "AppWidth"
    MAX_RESULT_COUNT = "MaxResultCount"
    QUERY_HOTKEYS = "QueryHotkeys"
    QUERY_SHORTCUTS = "QueryShortcuts"
    AI_PROVIDERS = "AIProviders"


Parser = Callable[[str, Collaborators], Any]
SideEffect = Callable[[GlobalSettings, Collaborators], None]


@dataclass(frozen=True)
class SettingUpdate:
    """How one key is parsed, stored and followed up."""

    field_name: str
    parse: Parser
    per_platform: bool = False
    after: SideEffect | None = None

    def apply(self, settings: GlobalSettings, value: Any) -> None:
        if self.per_platform:
            # Only the running OS's variant changes
            getattr(settings, self.field_name).set(value)
        else:
            setattr(settings, self.field_name, value)

    def read(self, settings: GlobalSettings) -> Any:
        value = getattr(settings, self.field_name)
        return value.get() if self.per_platform else value


def parse_bool(value: str, _collaborators: Collaborators) -> bool:
    return value == "true"


def parse_str(value: str, _collaborators: Collaborators) -> str:
    return value


def parse_int(value: str, _collaborators: Collaborators) -> int:
    # ValueError propagates unchanged to the caller
    return int(value)


def parse_hotkey(value: str, collaborators: Collaborators) -> str:
    if value and not collaborators.hotkeys.is_available(value):
        raise HotkeyUnavailableError(value)
    return value


def parse_lang_code(value: str, collaborators: Collaborators) -> str:
    collaborators.languages.switch_language(value)
    return value


def parse_json_list(item_type: type) -> Parser:
    adapter = TypeAdapter(list[item_type])

    def parse(value: str, _collaborators: Collaborators) -> list:
        # pydantic ValidationError (a ValueError) propagates unchanged
        return adapter.validate_json(value)

    return parse


def sync_proxy(settings: GlobalSettings, collaborators: Collaborators) -> None:
    url = settings.http_proxy_url.get()
    if settings.http_proxy_enabled.get() and url:
        collaborators.proxy.update_proxy(url)
    else:
        collaborators.proxy.update_proxy("")


def _flag(field_name: str) -> SettingUpdate:
    return SettingUpdate(field_name, parse_bool)


def _text(field_name: str) -> SettingUpdate:
    return SettingUpdate(field_name, parse_str)


SETTING_UPDATES: dict[SettingKey, SettingUpdate] = {
    SettingKey.MAIN_HOTKEY: SettingUpdate("main_hotkey", parse_hotkey, True),
    SettingKey.SELECTION_HOTKEY: SettingUpdate("selection_hotkey", parse_hotkey, True),
    SettingKey.HTTP_PROXY_ENABLED: SettingUpdate(
        "http_proxy_enabled", parse_bool, True, sync_proxy
    ),
    SettingKey.HTTP_PROXY_URL: SettingUpdate(
        "http_proxy_url", parse_str, True, sync_proxy
    ),
    SettingKey.ENABLE_AUTOSTART: SettingUpdate("enable_autostart", parse_bool, True),
    SettingKey.USE_PIN_YIN: _flag("use_pin_yin"),
    SettingKey.SWITCH_INPUT_METHOD_ABC: _flag("switch_input_method_abc"),
    SettingKey.HIDE_ON_START: _flag("hide_on_start"),
    SettingKey.HIDE_ON_LOST_FOCUS: _flag("hide_on_lost_focus"),
    SettingKey.SHOW_TRAY: _flag("show_tray"),
    SettingKey.ENABLE_AUTO_BACKUP: _flag("enable_auto_backup"),
    SettingKey.ENABLE_AUTO_UPDATE: _flag("enable_auto_update"),
    SettingKey.LANG_CODE: SettingUpdate("lang_code", parse_lang_code),
    SettingKey.LAST_QUERY_MODE: _text("last_query_mode"),
    SettingKey.THEME_ID: _text("theme_id"),
    SettingKey.SHOW_POSITION: _text("show_position"),
    SettingKey.CUSTOM_PYTHON_PATH: SettingUpdate("custom_python_path", parse_str, True),
    SettingKey.CUSTOM_NODEJS_PATH: SettingUpdate("custom_nodejs_path", parse_str, True),
    SettingKey.APP_WIDTH: SettingUpdate("app_width", parse_int),
    SettingKey.MAX_RESULT_COUNT: SettingUpdate("max_result_count", parse_int),
    SettingKey.QUERY_HOTKEYS: SettingUpdate(
        "query_hotkeys", parse_json_list(QueryHotkey), True
    ),
    SettingKey.QUERY_SHORTCUTS: SettingUpdate(
        "query_shortcuts", parse_json_list(QueryShortcut)
    ),
    SettingKey.AI_PROVIDERS: SettingUpdate("ai_providers", parse_json_list(AIProvider)),
}

_unhandled = set(SettingKey) - SETTING_UPDATES.keys()
if _unhandled:
    raise RuntimeError(f"settings without an update handler: {sorted(_unhandled)}")


def resolve_setting_key(key: str) -> SettingKey:
    """Map a raw key onto the closed set, rejecting anything else."""
    try:
        return SettingKey(key)
    except ValueError:
        raise UnknownSettingError(key) from None


def read_setting(settings: GlobalSettings, key: str) -> Any:
    """Current value of ``key`` as the running OS sees it."""
    return SETTING_UPDATES[resolve_setting_key(key)].read(settings)


def apply_setting_update(
    settings: GlobalSettings,
    collaborators: Collaborators,
    key: str,
    value: str,
) -> SettingKey:
    """Validate ``value`` for ``key`` and apply it to ``settings`` in place."""
    setting_key = resolve_setting_key(key)
    update = SETTING_UPDATES[setting_key]
    parsed = update.parse(value, collaborators)
    update.apply(settings, parsed)
    if update.after is not None:
        update.after(settings, collaborators)
    return setting_key
