"""Per-session state: user settings and cached Drive catalogs.

Catalogs are listed at most once per session and never refreshed. Start a new
session to pick up folders created or renamed since.
"""

from __future__ import annotations

import structlog

from gmail_drive_archiver.drive import DriveClient
from gmail_drive_archiver.models import ResourceCatalog, UserSettings
from gmail_drive_archiver.settings_store import UserSettingsStore

logger = structlog.get_logger()


class ArchiveSession:
    """Explicit context passed to every action handler."""

    def __init__(
        self,
        drive: DriveClient,
        store: UserSettingsStore,
        user_key: str,
    ) -> None:
        self.drive = drive
        self.store = store
        self.user_key = user_key
        self.user_settings: UserSettings = store.load(user_key)
        self._drives: ResourceCatalog | None = None
        self._folders: ResourceCatalog | None = None

    async def shared_drives(self) -> ResourceCatalog:
        if self._drives is None:
            self._drives = ResourceCatalog(await self.drive.list_shared_drives())
            logger.info("shared_drive_catalog_loaded", count=len(self._drives))
        return self._drives

    async def folders(self) -> ResourceCatalog:
        """Folders of the selected shared drive (empty if none is selected)."""

        if self._folders is None:
            drive_id = self.user_settings.selected_drive_id
            if not drive_id:
                logger.warning("no_shared_drive_selected", user_key=self.user_key)
                return ResourceCatalog()
            self._folders = ResourceCatalog(await self.drive.list_folders(drive_id))
            logger.info("folder_catalog_loaded", drive_id=drive_id, count=len(self._folders))
        return self._folders

    def save_settings(self, settings: UserSettings) -> None:
        """Persist new settings; a changed drive makes the folder catalog stale."""

        if settings.selected_drive_id != self.user_settings.selected_drive_id:
            self._folders = None
        self.store.save(self.user_key, settings)
        self.user_settings = settings
