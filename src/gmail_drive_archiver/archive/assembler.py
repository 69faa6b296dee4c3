"""Assemble mail messages into one archived PDF document.

Messages are rendered in order into a single HTML document. Images are
embedded inline; every other attachment is written to one companion folder
created on first use and linked from the document. The finished HTML is
converted to PDF by the storage backend.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import structlog

from gmail_drive_archiver.archive import rendering
from gmail_drive_archiver.archive.filenames import PDF_EXTENSION, document_basename
from gmail_drive_archiver.drive.client import PDF_MIME_TYPE
from gmail_drive_archiver.exceptions import DestinationMissingError, MissingInputError
from gmail_drive_archiver.models import (
    MISSING_ID,
    AssembledDocument,
    MessageRecord,
    ResourceCatalog,
    StoredFile,
)

logger = structlog.get_logger()


class DocumentStore(Protocol):
    """Storage operations the assembler depends on."""

    async def create_folder(self, name: str, parent_id: str) -> StoredFile: ...

    async def create_file(
        self, name: str, parent_id: str, content: bytes, mime_type: str
    ) -> StoredFile: ...

    async def convert_html_to_pdf(self, html: str, name: str) -> bytes: ...


class DocumentAssembler:
    """Builds and uploads archived documents."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        timezone_name: str = "CET",
        date_format: str = "%d.%m.%Y %H:%M %Z",
    ) -> None:
        """Create an assembler.

        Args:
            store: Storage backend used for attachments, conversion and upload.
            timezone_name: Zone used to print message dates.
            date_format: strftime format for message dates.
        """

        self._store = store
        self._timezone_name = timezone_name
        self._date_format = date_format

    async def assemble(
        self,
        messages: Sequence[MessageRecord],
        destination_name: str,
        catalog: ResourceCatalog,
        filename: str | None = None,
    ) -> AssembledDocument:
        """Render ``messages`` into a PDF document.

        Args:
            messages: Messages in thread order; a single message is allowed.
            destination_name: Folder name, resolved against ``catalog``.
            catalog: Folder catalog of the selected shared drive.
            filename: Optional user supplied document name (sanitized).

        Returns:
            AssembledDocument: PDF bytes, file name and folder ids.

        Raises:
            MissingInputError: If ``messages`` is empty.
            DestinationMissingError: If ``destination_name`` is not in the
                catalog. No remote call is made in that case.
        """

        if not messages:
            raise MissingInputError("messages")

        destination_id = catalog.resolve(destination_name)
        if destination_id == MISSING_ID:
            logger.warning("destination_folder_missing", destination_name=destination_name)
            raise DestinationMissingError(destination_name)

        basename = document_basename(filename, messages[0].subject)
        logger.info(
            "document_assembly_started",
            message_count=len(messages),
            destination_id=destination_id,
            basename=basename,
        )

        fragments: list[str] = []
        attachment_folder: StoredFile | None = None

        for index, message in enumerate(messages):
            fragments.append(
                rendering.render_header(
                    message, timezone_name=self._timezone_name, date_format=self._date_format
                )
            )
            fragments.append(rendering.extract_body(message.body_html))

            for attachment in message.attachments:
                if attachment.is_image:
                    fragments.append(rendering.render_inline_image(attachment))
                    continue

                if attachment_folder is None:
                    attachment_folder = await self._store.create_folder(basename, destination_id)
                    logger.info("attachment_folder_created", folder_id=attachment_folder.id)

                stored = await self._store.create_file(
                    attachment.filename,
                    attachment_folder.id,
                    attachment.data,
                    attachment.content_type,
                )
                fragments.append(rendering.render_attachment_link(attachment.filename, stored.url))

            if index < len(messages) - 1:
                fragments.append(rendering.DIVIDER)

        html = rendering.wrap_document(fragments)
        pdf = await self._store.convert_html_to_pdf(html, basename)

        document = AssembledDocument(
            content=pdf,
            filename=basename + PDF_EXTENSION,
            html=html,
            destination_folder_id=destination_id,
            attachment_folder_id=attachment_folder.id if attachment_folder else None,
        )
        logger.info(
            "document_assembly_completed",
            filename=document.filename,
            size=len(pdf),
            attachment_folder_id=document.attachment_folder_id,
        )
        return document

    async def upload(self, document: AssembledDocument) -> StoredFile:
        """Write the document to its attachment folder, else its destination."""

        stored = await self._store.create_file(
            document.filename, document.upload_folder_id, document.content, PDF_MIME_TYPE
        )
        logger.info("document_uploaded", file_id=stored.id, folder_id=document.upload_folder_id)
        return stored
