"""Data models for global settings, usage history and plugin settings."""

from __future__ import annotations

import hashlib
from typing import Any, NewType

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel, to_pascal

from launcher.platform_value import PlatformValue

MAX_QUERY_HISTORIES = 100
MAX_ACTIONED_RESULTS = 100

ResultHash = NewType("ResultHash", str)


def new_result_hash(plugin_id: str, title: str, subtitle: str) -> ResultHash:
    """Stable identity of a plugin result, derived from its id, title and subtitle."""
    digest = hashlib.md5(f"{plugin_id}{title}{subtitle}".encode())  # noqa: S324
    return ResultHash(digest.hexdigest())


class LegacyModel(BaseModel):
    """Base model for the PascalCase JSON written by earlier releases."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )


class QueryHotkey(LegacyModel):
    """A hotkey that fires a predefined query."""

    hotkey: str = ""
    query: str = ""
    is_silent_execution: bool = False


class QueryShortcut(LegacyModel):
    """A short alias that expands into a longer query."""

    shortcut: str = ""
    query: str = ""


class AIProvider(LegacyModel):
    """Credentials for one AI provider."""

    name: str = ""
    api_key: str = ""
    host: str = ""


class GlobalSettings(LegacyModel):
    """Whole-application configuration.

    Field defaults here are Go-style zero values so that a partially written
    legacy file parses cleanly; the product defaults live in
    ``launcher.settings.defaults``.
    """

    enable_autostart: PlatformValue[bool] = Field(default_factory=PlatformValue[bool])
    main_hotkey: PlatformValue[str] = Field(default_factory=PlatformValue[str])
    selection_hotkey: PlatformValue[str] = Field(default_factory=PlatformValue[str])
    use_pin_yin: bool = False
    switch_input_method_abc: bool = Field(False, alias="SwitchInputMethodABC")
    hide_on_start: bool = False
    hide_on_lost_focus: bool = False
    show_tray: bool = False
    lang_code: str = ""
    query_hotkeys: PlatformValue[list[QueryHotkey]] = Field(
        default_factory=PlatformValue[list[QueryHotkey]]
    )
    query_shortcuts: list[QueryShortcut] = Field(default_factory=list)
    last_query_mode: str = ""
    show_position: str = ""
    ai_providers: list[AIProvider] = Field(default_factory=list, alias="AIProviders")
    enable_auto_backup: bool = False
    enable_auto_update: bool = False
    custom_python_path: PlatformValue[str] = Field(default_factory=PlatformValue[str])
    custom_nodejs_path: PlatformValue[str] = Field(default_factory=PlatformValue[str])
    http_proxy_enabled: PlatformValue[bool] = Field(default_factory=PlatformValue[bool])
    http_proxy_url: PlatformValue[str] = Field(default_factory=PlatformValue[str])
    app_width: int = 0
    max_result_count: int = 0
    theme_id: str = ""
    last_window_x: int = 0
    last_window_y: int = 0

    @field_validator("query_shortcuts", "ai_providers", mode="before")
    @classmethod
    def null_list_is_empty(cls, value: Any) -> Any:
        """Go serialises an unset slice as null."""
        return [] if value is None else value

    def to_json_dict(self) -> dict[str, Any]:
        """Serialise with the legacy PascalCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class QueryHistory(LegacyModel):
    """One query the user ran."""

    query: str = ""
    timestamp: int = 0

    @field_validator("query", mode="before")
    @classmethod
    def extract_query_text(cls, value: Any) -> Any:
        """Older files store the whole query object; keep only its text."""
        if isinstance(value, dict):
            return value.get("QueryText", "")
        return "" if value is None else value


class ActionedResult(LegacyModel):
    """One time the user acted on a result."""

    timestamp: int = 0
    query: str = ""


class AppData(LegacyModel):
    """Usage history, stored separately from configuration."""

    query_histories: list[QueryHistory] = Field(default_factory=list)
    actioned_results: dict[ResultHash, list[ActionedResult]] = Field(
        default_factory=dict
    )
    favorite_results: dict[ResultHash, bool] = Field(default_factory=dict)

    @field_validator(
        "query_histories", "actioned_results", "favorite_results", mode="before"
    )
    @classmethod
    def null_is_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return [] if info.field_name == "query_histories" else {}
        return value

    def sort_histories(self) -> None:
        """Order query histories oldest first."""
        self.query_histories.sort(key=lambda history: history.timestamp)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class PluginSettingDefinition(BaseModel):
    """A setting a plugin declares, with its default value."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str = "textbox"
    key: str
    default_value: str = ""


def get_all_defaults(definitions: list[PluginSettingDefinition]) -> dict[str, str]:
    """Map each declared setting key to its default value."""
    return {
        definition.key: definition.default_value
        for definition in definitions
        if definition.key
    }


class PluginSetting(LegacyModel):
    """Persisted settings of one plugin."""

    name: str = ""
    settings: dict[str, str] | None = None

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FavoriteClipboardItem(BaseModel):
    """A clipboard favorite in the unified storage format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    type: str = ""
    content: str = ""
    file_path: str | None = None
    icon_data: str | None = None
    width: int | None = None
    height: int | None = None
    file_size: int | None = None
    timestamp: int = 0
    created_at: int = 0

    @field_validator("file_path", mode="before")
    @classmethod
    def empty_path_is_none(cls, value: Any) -> Any:
        return value or None

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
