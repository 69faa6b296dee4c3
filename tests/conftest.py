"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import base64
from datetime import datetime, timezone

import pytest

from gmail_drive_archiver.exceptions import NotificationSendError
from gmail_drive_archiver.models import Attachment, MessageRecord, RemoteResource, StoredFile


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class FakeDrive:
    """In-memory stand-in for DriveClient that records every call."""

    def __init__(
        self,
        drives: list[RemoteResource] | None = None,
        folders: list[RemoteResource] | None = None,
    ) -> None:
        self.drives = drives or []
        self.folders = folders or []
        self.list_drive_calls = 0
        self.list_folder_calls: list[str] = []
        self.created_folders: list[tuple[str, str]] = []
        self.created_files: list[tuple[str, str, bytes, str]] = []
        self.converted: list[tuple[str, str]] = []

    @property
    def call_count(self) -> int:
        return len(self.created_folders) + len(self.created_files) + len(self.converted)

    async def list_shared_drives(self) -> list[RemoteResource]:
        self.list_drive_calls += 1
        return list(self.drives)

    async def list_folders(self, drive_id: str) -> list[RemoteResource]:
        self.list_folder_calls.append(drive_id)
        return list(self.folders)

    async def create_folder(self, name: str, parent_id: str) -> StoredFile:
        self.created_folders.append((name, parent_id))
        folder_id = f"folder-{len(self.created_folders)}"
        return StoredFile(id=folder_id, name=name, url=f"https://drive.test/{folder_id}")

    async def create_file(
        self, name: str, parent_id: str, content: bytes, mime_type: str
    ) -> StoredFile:
        self.created_files.append((name, parent_id, content, mime_type))
        file_id = f"file-{len(self.created_files)}"
        return StoredFile(id=file_id, name=name, url=f"https://drive.test/{file_id}")

    async def convert_html_to_pdf(self, html: str, name: str) -> bytes:
        self.converted.append((html, name))
        return b"%PDF-1.4 fake"


class FakeGmail:
    """In-memory stand-in for GmailClient."""

    def __init__(self, messages: list[MessageRecord] | None = None, fail_send: bool = False) -> None:
        self.messages = {m.id: m for m in messages or []}
        self.fail_send = fail_send
        self.sent: list[tuple[list[str], str, str]] = []
        self.reads = 0

    async def get_message(self, message_id: str, fmt: str = "full") -> dict:
        self.reads += 1
        message = self.messages[message_id]
        return {"id": message.id, "threadId": message.thread_id}

    async def get_message_record(self, message_id: str) -> MessageRecord:
        self.reads += 1
        return self.messages[message_id]

    async def get_thread_records(self, thread_id: str) -> list[MessageRecord]:
        self.reads += 1
        return [m for m in self.messages.values() if m.thread_id == thread_id]

    async def send_email(self, to: list[str], subject: str, html_body: str) -> None:
        if self.fail_send:
            raise NotificationSendError("quota exceeded")
        self.sent.append((to, subject, html_body))


@pytest.fixture
def mock_settings(tmp_path):
    """Provide mock settings for testing."""
    from gmail_drive_archiver.config import Settings

    return Settings(
        google_credentials_path=tmp_path / "credentials.json",
        google_token_path=tmp_path / "token.json",
        settings_db_path=tmp_path / "settings.sqlite3",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def folders() -> list[RemoteResource]:
    return [
        RemoteResource(name="Invoices", id="fld-invoices"),
        RemoteResource(name="Contracts", id="fld-contracts"),
        RemoteResource(name="Archive", id="fld-archive"),
    ]


@pytest.fixture
def fake_drive(folders) -> FakeDrive:
    return FakeDrive(
        drives=[
            RemoteResource(name="Finance", id="drv-finance"),
            RemoteResource(name="Legal", id="drv-legal"),
        ],
        folders=folders,
    )


@pytest.fixture
def thread_messages() -> list[MessageRecord]:
    """Three messages: plain, one PDF attachment, one inline image."""
    return [
        MessageRecord(
            id="m1",
            thread_id="t1",
            subject="Quarterly numbers",
            sender="Alice Example <alice@example.com>",
            to="Bob <bob@example.com>",
            timestamp=datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
            body_html="<p>Here are the numbers.</p>",
        ),
        MessageRecord(
            id="m2",
            thread_id="t1",
            subject="Re: Quarterly numbers",
            sender="Bob <bob@example.com>",
            to="Alice Example <alice@example.com>",
            timestamp=datetime(2024, 1, 15, 13, 0, tzinfo=timezone.utc),
            body_html="<p>Report attached.</p>",
            attachments=[
                Attachment(filename="report.pdf", content_type="application/pdf", data=b"%PDF report"),
            ],
        ),
        MessageRecord(
            id="m3",
            thread_id="t1",
            subject="Re: Quarterly numbers",
            sender="Alice Example <alice@example.com>",
            to="Bob <bob@example.com>",
            timestamp=datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc),
            body_html="<p>Chart below.</p>",
            attachments=[
                Attachment(filename="chart.png", content_type="image/png", data=b"\x89PNG chart"),
            ],
        ),
    ]


@pytest.fixture
def sample_gmail_message() -> dict:
    """Provide a Gmail API message in format=full."""
    return {
        "id": "msg123456",
        "threadId": "thread789",
        "internalDate": "1705320000000",
        "payload": {
            "mimeType": "multipart/mixed",
            "headers": [
                {"name": "Subject", "value": "Weekly report"},
                {"name": "From", "value": "Reports <reports@example.com>"},
                {"name": "To", "value": "user@example.com"},
                {"name": "Cc", "value": "boss@example.com"},
                {"name": "Date", "value": "Mon, 15 Jan 2024 12:00:00 +0000"},
            ],
            "parts": [
                {
                    "mimeType": "multipart/alternative",
                    "filename": "",
                    "parts": [
                        {
                            "mimeType": "text/plain",
                            "filename": "",
                            "body": {"data": b64url(b"Plain text version")},
                        },
                        {
                            "mimeType": "text/html",
                            "filename": "",
                            "body": {
                                "data": b64url(
                                    b"<html><head><title>x</title></head>"
                                    b"<body><p>HTML version</p></body></html>"
                                )
                            },
                        },
                    ],
                },
                {
                    "mimeType": "application/pdf",
                    "filename": "report.pdf",
                    "body": {"attachmentId": "att-1", "size": 10},
                },
                {
                    "mimeType": "image/png",
                    "filename": "logo.png",
                    "body": {"data": b64url(b"\x89PNG logo")},
                },
            ],
        },
    }


@pytest.fixture
def make_gmail():
    """Factory for FakeGmail instances."""
    return FakeGmail
