"""Gmail API client implementation.

This module provides a client for reading messages and sending notification
emails through the Gmail API.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
    Calls are still awaited one at a time; nothing runs in parallel.
"""

from __future__ import annotations

import asyncio
import base64
from email.mime.text import MIMEText
from typing import Any

import structlog

from gmail_drive_archiver.config import Settings
from gmail_drive_archiver.exceptions import (
    AuthenticationError,
    ConfigurationError,
    GmailAPIError,
    NotificationSendError,
)
from gmail_drive_archiver.gmail.parsing import (
    decode_base64url,
    iter_attachment_parts,
    message_to_record,
)
from gmail_drive_archiver.models import Attachment, MessageRecord

logger = structlog.get_logger()


class GmailClient:
    """Gmail API client for reading and sending mail.

    This client handles authentication, message and attachment retrieval,
    and sending notification emails.
    """

    def __init__(self, settings: Settings | None = None, service: Any | None = None) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
            service: Pre-built Gmail service. If None, call authenticate() first.
        """
        from gmail_drive_archiver.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = service
        logger.info("gmail_client_initialized")

    async def authenticate(self) -> None:
        """Authenticate with the Gmail API using OAuth2.

        Raises:
            ConfigurationError: If the credentials file is missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        from gmail_drive_archiver.auth import build_service

        logger.info("gmail_authentication_started")
        try:
            self._service = await asyncio.to_thread(build_service, "gmail", "v1", self.settings)
        except ConfigurationError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def get_message(self, message_id: str, fmt: str = "full") -> dict[str, Any]:
        """Get a message by ID.

        Args:
            message_id: Gmail message ID.
            fmt: API response format; "minimal" returns ids and labels only.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()
        logger.info("getting_message", message_id=message_id)

        try:
            return await asyncio.to_thread(
                lambda: service.users()
                .messages()
                .get(userId=self.settings.gmail_user_id, id=message_id, format=fmt)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_get_message_failed", message_id=message_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def get_thread(self, thread_id: str) -> dict[str, Any]:
        """Get a full thread, messages in thread order.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()
        logger.info("getting_thread", thread_id=thread_id)

        try:
            return await asyncio.to_thread(
                lambda: service.users()
                .threads()
                .get(userId=self.settings.gmail_user_id, id=thread_id, format="full")
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_get_thread_failed", thread_id=thread_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def get_attachment(self, message_id: str, attachment_id: str) -> bytes:
        """Download and decode one attachment body.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()

        try:
            response = await asyncio.to_thread(
                lambda: service.users()
                .messages()
                .attachments()
                .get(userId=self.settings.gmail_user_id, messageId=message_id, id=attachment_id)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "gmail_get_attachment_failed",
                message_id=message_id,
                attachment_id=attachment_id,
                error=str(exc),
            )
            raise GmailAPIError(str(exc)) from exc

        return decode_base64url(response.get("data") or "")

    async def get_message_record(self, message_id: str) -> MessageRecord:
        """Fetch a message with its attachments as a MessageRecord."""

        message = await self.get_message(message_id)
        return await self._to_record(message)

    async def get_thread_records(self, thread_id: str) -> list[MessageRecord]:
        """Fetch every message of a thread as MessageRecords, in thread order."""

        thread = await self.get_thread(thread_id)
        records: list[MessageRecord] = []
        for message in thread.get("messages") or []:
            records.append(await self._to_record(message))
        return records

    async def send_email(self, to: list[str], subject: str, html_body: str) -> None:
        """Send an HTML email from the authenticated account.

        Raises:
            NotificationSendError: If the message cannot be sent.
        """

        logger.info("sending_email", recipient_count=len(to))
        try:
            # Header values with embedded CR/LF fail here, not at send time.
            mime = MIMEText(html_body, "html", "utf-8")
            mime["To"] = ", ".join(to)
            mime["Subject"] = subject
            raw = base64.urlsafe_b64encode(mime.as_bytes()).decode("ascii")

            service = self._require_service()
            await asyncio.to_thread(
                lambda: service.users()
                .messages()
                .send(userId=self.settings.gmail_user_id, body={"raw": raw})
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_send_email_failed", error=str(exc))
            raise NotificationSendError(str(exc)) from exc

    async def _to_record(self, message: dict[str, Any]) -> MessageRecord:
        message_id = str(message.get("id") or "")
        attachments: list[Attachment] = []
        for part in iter_attachment_parts(message):
            body = part.get("body") or {}
            if body.get("data"):
                data = decode_base64url(body["data"])
            elif body.get("attachmentId"):
                data = await self.get_attachment(message_id, body["attachmentId"])
            else:
                data = b""
            attachments.append(
                Attachment(
                    filename=part["filename"],
                    content_type=part.get("mimeType") or "application/octet-stream",
                    data=data,
                )
            )
        return message_to_record(message, attachments)

    def _require_service(self) -> Any:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )
        return self._service
