"""Google Drive API client implementation.

Covers the Drive operations the archiver needs: listing shared drives and
folders, creating folders and files, and converting HTML to PDF.

Notes:
    Like the Gmail client, every call is made through `asyncio.to_thread` and
    awaited sequentially.
"""

from __future__ import annotations

import asyncio
import io
from typing import Any

import structlog

from gmail_drive_archiver.config import Settings
from gmail_drive_archiver.drive.listing import list_resources
from gmail_drive_archiver.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DriveAPIError,
)
from gmail_drive_archiver.models import RemoteResource, StoredFile

logger = structlog.get_logger()

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"
PDF_MIME_TYPE = "application/pdf"

_FOLDER_QUERY = f"mimeType='{FOLDER_MIME_TYPE}' and trashed=false"


class DriveClient:
    """Drive API client for shared-drive storage operations."""

    def __init__(self, settings: Settings | None = None, service: Any | None = None) -> None:
        """Initialize Drive client.

        Args:
            settings: Application settings. If None, uses default settings.
            service: Pre-built Drive service. If None, call authenticate() first.
        """
        from gmail_drive_archiver.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = service
        logger.info("drive_client_initialized", page_size=self.settings.drive_page_size)

    async def authenticate(self) -> None:
        """Authenticate with the Drive API using OAuth2.

        Raises:
            ConfigurationError: If the credentials file is missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        from gmail_drive_archiver.auth import build_service

        logger.info("drive_authentication_started")
        try:
            self._service = await asyncio.to_thread(build_service, "drive", "v3", self.settings)
        except ConfigurationError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("drive_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("drive_authentication_completed")

    async def list_shared_drives(self) -> list[RemoteResource]:
        """List every shared drive visible to the user.

        Raises:
            RemoteListError: If any page request fails.
        """

        service = self._require_service()
        page_size = self.settings.drive_page_size
        logger.info("listing_shared_drives", page_size=page_size)

        def fetch_page(page_token: str | None) -> dict[str, Any]:
            return (
                service.drives()
                .list(pageSize=page_size, pageToken=page_token, fields="nextPageToken, drives(id, name)")
                .execute()
            )

        items = await asyncio.to_thread(list_resources, fetch_page, "drives")
        return [RemoteResource(name=i["name"], id=i["id"]) for i in items]

    async def list_folders(self, drive_id: str) -> list[RemoteResource]:
        """List every non-trashed folder in a shared drive.

        Raises:
            RemoteListError: If any page request fails.
        """

        service = self._require_service()
        page_size = self.settings.drive_page_size
        logger.info("listing_folders", drive_id=drive_id, page_size=page_size)

        def fetch_page(page_token: str | None) -> dict[str, Any]:
            return (
                service.files()
                .list(
                    q=_FOLDER_QUERY,
                    corpora="drive",
                    driveId=drive_id,
                    includeItemsFromAllDrives=True,
                    supportsAllDrives=True,
                    pageSize=page_size,
                    pageToken=page_token,
                    fields="nextPageToken, files(id, name)",
                )
                .execute()
            )

        items = await asyncio.to_thread(list_resources, fetch_page, "files")
        return [RemoteResource(name=i["name"], id=i["id"]) for i in items]

    async def create_folder(self, name: str, parent_id: str) -> StoredFile:
        """Create a folder under ``parent_id``.

        Raises:
            DriveAPIError: If the folder cannot be created.
        """

        service = self._require_service()
        logger.info("creating_folder", name=name, parent_id=parent_id)
        body = {"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]}

        try:
            created = await asyncio.to_thread(
                lambda: service.files()
                .create(body=body, fields="id, name, webViewLink", supportsAllDrives=True)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("drive_create_folder_failed", name=name, error=str(exc))
            raise DriveAPIError(str(exc)) from exc

        return _to_stored_file(created, name)

    async def create_file(
        self,
        name: str,
        parent_id: str,
        content: bytes,
        mime_type: str,
    ) -> StoredFile:
        """Upload ``content`` as a new file under ``parent_id``.

        Raises:
            DriveAPIError: If the upload fails.
        """

        from googleapiclient.http import MediaIoBaseUpload

        service = self._require_service()
        logger.info(
            "creating_file", name=name, parent_id=parent_id, mime_type=mime_type, size=len(content)
        )
        body = {"name": name, "parents": [parent_id]}
        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)

        try:
            created = await asyncio.to_thread(
                lambda: service.files()
                .create(
                    body=body,
                    media_body=media,
                    fields="id, name, webViewLink",
                    supportsAllDrives=True,
                )
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("drive_create_file_failed", name=name, error=str(exc))
            raise DriveAPIError(str(exc)) from exc

        return _to_stored_file(created, name)

    async def convert_html_to_pdf(self, html: str, name: str) -> bytes:
        """Render an HTML document to PDF using Drive's document conversion.

        The HTML is imported as a temporary Google Doc, exported as PDF, and
        the temporary document is deleted again.

        Raises:
            DriveAPIError: If any conversion step fails.
        """

        from googleapiclient.http import MediaIoBaseUpload

        service = self._require_service()
        media = MediaIoBaseUpload(io.BytesIO(html.encode("utf-8")), mimetype="text/html", resumable=False)
        logger.info("converting_html_to_pdf", name=name, html_length=len(html))

        try:
            doc = await asyncio.to_thread(
                lambda: service.files()
                .create(
                    body={"name": name, "mimeType": GOOGLE_DOC_MIME_TYPE},
                    media_body=media,
                    fields="id",
                )
                .execute()
            )
            doc_id = doc["id"]
            try:
                pdf = await asyncio.to_thread(
                    lambda: service.files().export(fileId=doc_id, mimeType=PDF_MIME_TYPE).execute()
                )
            finally:
                await asyncio.to_thread(lambda: service.files().delete(fileId=doc_id).execute())
        except Exception as exc:  # noqa: BLE001
            logger.exception("drive_pdf_conversion_failed", name=name, error=str(exc))
            raise DriveAPIError(str(exc)) from exc

        return pdf

    def _require_service(self) -> Any:
        if self._service is None:
            raise AuthenticationError(
                "Drive client is not authenticated. Call await DriveClient.authenticate() first."
            )
        return self._service


def _to_stored_file(created: dict[str, Any], name: str) -> StoredFile:
    return StoredFile(
        id=str(created.get("id") or ""),
        name=str(created.get("name") or name),
        url=str(created.get("webViewLink") or ""),
    )
