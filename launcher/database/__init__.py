from .connection import Database
from .models import Base, CoreSetting, PluginSettingRecord
from .store import PluginSettingStore, SettingStore, decode_json, encode_value

__all__ = [
    "Base",
    "CoreSetting",
    "Database",
    "PluginSettingRecord",
    "PluginSettingStore",
    "SettingStore",
    "decode_json",
    "encode_value",
]
