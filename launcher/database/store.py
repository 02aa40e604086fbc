"""Namespaced key-value access to the settings tables.

Both stores work inside a caller-owned session, so every write joins the
caller's transaction. String values are stored verbatim; anything else is
JSON-encoded (pydantic models by their aliases).
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic_core import to_jsonable_python
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from launcher.database.models import CoreSetting, PluginSettingRecord

logger = logging.getLogger(__name__)


def encode_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(to_jsonable_python(value, by_alias=True), ensure_ascii=False)


def decode_json(raw: str | None, default: Any = None) -> Any:
    if raw is None or raw == "":
        return default
    return json.loads(raw)


class SettingStore:
    """Global settings in the core namespace."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def set(self, key: str, value: Any) -> None:
        self.session.merge(CoreSetting(key=key, value=encode_value(value)))
        self.session.flush()

    def get(self, key: str) -> str | None:
        record = self.session.get(CoreSetting, key)
        return record.value if record else None

    def get_json(self, key: str, default: Any = None) -> Any:
        return decode_json(self.get(key), default)

    def get_all(self) -> dict[str, str]:
        rows = self.session.execute(select(CoreSetting.key, CoreSetting.value))
        return dict(rows.all())

    def delete(self, key: str) -> None:
        self.session.execute(delete(CoreSetting).where(CoreSetting.key == key))


class PluginSettingStore:
    """Settings of one plugin, isolated by plugin id."""

    def __init__(self, session: Session, plugin_id: str) -> None:
        self.session = session
        self.plugin_id = plugin_id

    def set(self, key: str, value: Any) -> None:
        self.session.merge(
            PluginSettingRecord(
                plugin_id=self.plugin_id, key=key, value=encode_value(value)
            )
        )
        self.session.flush()

    def get(self, key: str) -> str | None:
        record = self.session.get(PluginSettingRecord, (self.plugin_id, key))
        return record.value if record else None

    def get_json(self, key: str, default: Any = None) -> Any:
        return decode_json(self.get(key), default)

    def get_all(self) -> dict[str, str]:
        rows = self.session.execute(
            select(PluginSettingRecord.key, PluginSettingRecord.value).where(
                PluginSettingRecord.plugin_id == self.plugin_id
            )
        )
        return dict(rows.all())

    def delete(self, key: str) -> None:
        self.session.execute(
            delete(PluginSettingRecord).where(
                PluginSettingRecord.plugin_id == self.plugin_id,
                PluginSettingRecord.key == key,
            )
        )
