"""End-to-end archive action: fetch, assemble, upload, notify."""

from __future__ import annotations

import structlog

from gmail_drive_archiver.archive.assembler import DocumentAssembler
from gmail_drive_archiver.archive.notifier import notify_recipients
from gmail_drive_archiver.config import Settings
from gmail_drive_archiver.exceptions import DestinationMissingError, MissingInputError
from gmail_drive_archiver.gmail import GmailClient
from gmail_drive_archiver.models import MISSING_ID, ArchiveRequest, ArchiveResult, MessageRecord
from gmail_drive_archiver.session import ArchiveSession

logger = structlog.get_logger()


class ArchiveService:
    """Archives a message or its thread into the selected shared drive."""

    def __init__(
        self,
        gmail: GmailClient,
        session: ArchiveSession,
        settings: Settings | None = None,
    ) -> None:
        from gmail_drive_archiver.config import get_settings

        self.settings = settings or get_settings()
        self.gmail = gmail
        self.session = session
        self.assembler = DocumentAssembler(
            session.drive,
            timezone_name=self.settings.display_timezone,
            date_format=self.settings.date_format,
        )

    async def archive(self, request: ArchiveRequest) -> ArchiveResult:
        """Archive the message named in ``request``.

        Raises:
            MissingInputError: If no destination folder was entered.
            DestinationMissingError: If the folder is not in the selected drive.
            RemoteListError: If the folder catalog cannot be listed.
            GmailAPIError: If messages cannot be read.
            DriveAPIError: If a Drive write or the PDF conversion fails.
        """

        if not request.folder_name:
            raise MissingInputError("folder_name")

        catalog = await self.session.folders()
        if catalog.resolve(request.folder_name) == MISSING_ID:
            logger.warning("destination_folder_missing", destination_name=request.folder_name)
            raise DestinationMissingError(request.folder_name)

        messages = await self._load_messages(request.message_id)

        document = await self.assembler.assemble(
            messages, request.folder_name, catalog, filename=request.filename
        )
        stored = await self.assembler.upload(document)

        notified = await notify_recipients(
            self.gmail,
            request.notify,
            stored,
            request.notify_subject or self.settings.notification_subject,
            request.notify_body or self.settings.notification_body,
        )

        logger.info(
            "archive_completed",
            message_id=request.message_id,
            file_id=stored.id,
            filename=document.filename,
            notified=notified,
        )
        return ArchiveResult(
            file=stored,
            filename=document.filename,
            attachment_folder_id=document.attachment_folder_id,
            notified=notified,
        )

    async def _load_messages(self, message_id: str) -> list[MessageRecord]:
        if not self.session.user_settings.save_whole_thread:
            return [await self.gmail.get_message_record(message_id)]

        # Only the thread id is needed here; attachments come with the thread.
        message = await self.gmail.get_message(message_id, fmt="minimal")
        thread_id = message.get("threadId")
        if not thread_id:
            return [await self.gmail.get_message_record(message_id)]
        return await self.gmail.get_thread_records(thread_id)
