from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

Base = declarative_base()


class CoreSetting(Base):
    """One global setting in the core namespace"""

    __tablename__ = "core_settings"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now(), nullable=False,
    )

    def __repr__(self: CoreSetting) -> str:
        return f"<CoreSetting(key='{self.key}')>"


class PluginSettingRecord(Base):
    """One setting in a plugin's own namespace"""

    __tablename__ = "plugin_settings"

    plugin_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now(), nullable=False,
    )

    __table_args__ = (Index("idx_plugin_settings_plugin_id", "plugin_id"),)

    def __repr__(self: PluginSettingRecord) -> str:
        return f"<PluginSettingRecord(plugin_id='{self.plugin_id}', key='{self.key}')>"
