"""SQLite-backed per-user settings store.

Settings are kept as key/value rows scoped by a user key. Only two keys are
read and written: the selected shared drive and the whole-thread flag.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

import structlog

from gmail_drive_archiver.models import UserSettings

logger = structlog.get_logger()

KEY_SELECTED_DRIVE_ID = "selected_drive_id"
KEY_SAVE_WHOLE_THREAD = "save_whole_thread"


class UserSettingsStore:
    """Repository for per-user archiver preferences."""

    def __init__(self, db_path: Path) -> None:
        """Create a store.

        Args:
            db_path: Path to the SQLite database file.
        """

        self._db_path = db_path

    def initialize(self) -> None:
        """Create the settings table if needed."""

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS user_settings (
                    user_key TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at_iso TEXT NOT NULL,
                    PRIMARY KEY (user_key, key)
                );
                """
            )
            conn.commit()

    def load(self, user_key: str) -> UserSettings:
        """Read a user's settings; absent keys use the model defaults."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT key, value FROM user_settings WHERE user_key = ?",
                (user_key,),
            ).fetchall()

        values = {row["key"]: row["value"] for row in rows}
        settings = UserSettings()
        if KEY_SELECTED_DRIVE_ID in values:
            settings.selected_drive_id = values[KEY_SELECTED_DRIVE_ID]
        if KEY_SAVE_WHOLE_THREAD in values:
            settings.save_whole_thread = values[KEY_SAVE_WHOLE_THREAD] == "true"
        return settings

    def save(self, user_key: str, settings: UserSettings) -> None:
        """Overwrite both settings keys for a user."""

        now_iso = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO user_settings (user_key, key, value, updated_at_iso)
                VALUES (:user_key, :key, :value, :updated_at_iso)
                ON CONFLICT(user_key, key) DO UPDATE SET
                    value=excluded.value,
                    updated_at_iso=excluded.updated_at_iso
                """,
                [
                    {
                        "user_key": user_key,
                        "key": KEY_SELECTED_DRIVE_ID,
                        "value": settings.selected_drive_id,
                        "updated_at_iso": now_iso,
                    },
                    {
                        "user_key": user_key,
                        "key": KEY_SAVE_WHOLE_THREAD,
                        "value": "true" if settings.save_whole_thread else "false",
                        "updated_at_iso": now_iso,
                    },
                ],
            )
            conn.commit()

        logger.info(
            "user_settings_saved",
            user_key=user_key,
            selected_drive_id=settings.selected_drive_id,
            save_whole_thread=settings.save_whole_thread,
        )

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        try:
            conn.row_factory = sqlite3.Row
            yield conn
        finally:
            conn.close()
