"""Merge the clipboard plugin's two legacy favorite stores into one setting.

Favorites lived either in the plugin's JSON ``history`` setting (flagged with
``isFavorite``) or in its own SQLite file. Both are converted to
``FavoriteClipboardItem`` and written, JSON favorites first, as one JSON list
under the plugin's ``favorites`` key. Items favorited in both places appear
twice; the lists are not de-duplicated.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser
from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from launcher.database import Database, PluginSettingStore
from launcher.errors import ClipboardMigrationError
from launcher.settings.models import FavoriteClipboardItem

logger = logging.getLogger(__name__)

CLIPBOARD_PLUGIN_ID = "5f815d98-27f5-488d-a756-c317ea39935b"
LEGACY_HISTORY_KEY = "history"
FAVORITES_KEY = "favorites"

SELECT_FAVORITES_SQL = """
    SELECT id, type, content, file_path, icon_data, width, height, file_size,
           timestamp, is_favorite, created_at
    FROM clipboard_history
    WHERE is_favorite = 1
    ORDER BY timestamp DESC
"""
DELETE_FAVORITES_SQL = "DELETE FROM clipboard_history WHERE is_favorite = 1"


class LegacyClipboardHistory(BaseModel):
    """An entry of the clipboard plugin's old JSON history."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    text: str = ""
    type: str = ""
    timestamp: int = 0
    imagePath: str = ""  # noqa: N815
    isFavorite: bool = False  # noqa: N815

    @field_validator("*", mode="before")
    @classmethod
    def null_is_zero(cls, value: Any, info: ValidationInfo) -> Any:
        """A ``null`` decodes to the field's zero value."""
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


def clipboard_database_path(plugin_settings_dir: Path) -> Path:
    return plugin_settings_dir / f"{CLIPBOARD_PLUGIN_ID}_clipboard.db"


def favorites_from_json_history(history_json: str) -> list[FavoriteClipboardItem]:
    """Favorites flagged in the legacy JSON history. Raises on malformed JSON."""
    history = [
        LegacyClipboardHistory.model_validate(item) for item in json.loads(history_json)
    ]
    return [
        FavoriteClipboardItem(
            id=item.id,
            type=item.type,
            content=item.text,
            file_path=item.imagePath,
            timestamp=item.timestamp,
            created_at=item.timestamp // 1000,  # milliseconds to seconds
        )
        for item in history
        if item.isFavorite
    ]


def _to_epoch_seconds(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, int | float):
        return int(value)
    if not isinstance(value, datetime):
        value = date_parser.parse(str(value))
    # SQLite CURRENT_TIMESTAMP values carry no zone and are UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp())


def _row_to_favorite(row: Any) -> FavoriteClipboardItem:
    return FavoriteClipboardItem(
        id=str(row.id),
        type=row.type or "",
        content=row.content or "",
        file_path=row.file_path,
        icon_data=row.icon_data,
        width=row.width,
        height=row.height,
        file_size=row.file_size,
        timestamp=row.timestamp or 0,
        created_at=_to_epoch_seconds(row.created_at),
    )


def favorites_from_database(db_path: Path) -> list[FavoriteClipboardItem]:
    """Favorite rows of the plugin's SQLite file, newest first, read-only."""
    if not db_path.exists():
        return []

    engine = create_engine(f"sqlite:///file:{db_path.as_posix()}?mode=ro&uri=true")
    try:
        with engine.connect() as conn:
            rows = conn.execute(text(SELECT_FAVORITES_SQL)).all()
        return [_row_to_favorite(row) for row in rows]
    finally:
        engine.dispose()


def delete_database_favorites(db_path: Path) -> int:
    """Remove the favorite rows that were migrated; returns the deleted count."""
    if not db_path.exists():
        return 0

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        with engine.begin() as conn:
            result = conn.execute(text(DELETE_FAVORITES_SQL))
        return result.rowcount
    finally:
        engine.dispose()


def migrate_clipboard_favorites(database: Database, plugin_settings_dir: Path) -> int:
    """Reconcile clipboard favorites into the settings store.

    Runs after the main migration has committed. Returns the number of
    favorites written; raises ``ClipboardMigrationError`` when the merged list
    cannot be saved.
    """
    favorites: list[FavoriteClipboardItem] = []

    with database.session() as db:
        store = PluginSettingStore(db, CLIPBOARD_PLUGIN_ID)
        history_json = store.get(LEGACY_HISTORY_KEY)
        if history_json:
            try:
                json_favorites = favorites_from_json_history(history_json)
            except (ValueError, TypeError, ValidationError) as e:
                logger.warning(f"Failed to parse legacy clipboard history: {e}")
            else:
                favorites.extend(json_favorites)
                logger.info(
                    f"Found {len(json_favorites)} favorite items in legacy JSON settings"
                )
            # Cleared whether or not favorites were found
            store.set(LEGACY_HISTORY_KEY, "")

    db_path = clipboard_database_path(plugin_settings_dir)
    try:
        db_favorites = favorites_from_database(db_path)
    except (SQLAlchemyError, ValueError, OverflowError) as e:
        # A row that cannot be converted leaves the database untouched
        logger.warning(f"Failed to get database favorites for migration: {e}")
    else:
        favorites.extend(db_favorites)
        logger.info(f"Found {len(db_favorites)} favorite items in database")
        if db_favorites:
            try:
                deleted = delete_database_favorites(db_path)
            except SQLAlchemyError as e:
                logger.warning(f"Failed to delete favorites from database: {e}")
            else:
                logger.info(
                    f"Deleted {deleted} favorite items from database after migration"
                )

    if not favorites:
        return 0

    payload = json.dumps(
        [item.to_json_dict() for item in favorites], ensure_ascii=False
    )
    try:
        with database.session() as db:
            PluginSettingStore(db, CLIPBOARD_PLUGIN_ID).set(FAVORITES_KEY, payload)
    except SQLAlchemyError as e:
        raise ClipboardMigrationError(f"failed to save migrated favorites: {e}") from e

    logger.info(f"Migrated {len(favorites)} favorite clipboard items to new storage")
    return len(favorites)
