from .collaborators import Collaborators
from .manager import SettingsManager
from .models import (
    AppData,
    GlobalSettings,
    PluginSetting,
    PluginSettingDefinition,
    QueryHistory,
    new_result_hash,
)
from .persistence import DatabaseBackend, JsonFileBackend, SnapshotBackend
from .updates import SettingKey

__all__ = [
    "AppData",
    "Collaborators",
    "DatabaseBackend",
    "GlobalSettings",
    "JsonFileBackend",
    "PluginSetting",
    "PluginSettingDefinition",
    "QueryHistory",
    "SettingKey",
    "SettingsManager",
    "SnapshotBackend",
    "new_result_hash",
]
