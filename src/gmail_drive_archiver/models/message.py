"""Mail message models consumed by the document assembler."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Attachment(BaseModel):
    """A message attachment with its decoded content."""

    filename: str = Field(description="Attachment file name")
    content_type: str = Field(default="application/octet-stream", description="MIME type")
    data: bytes = Field(default=b"", description="Decoded attachment bytes")

    @property
    def is_image(self) -> bool:
        """Whether the attachment is rendered inline instead of extracted."""
        return self.content_type.lower().startswith("image/")


class MessageRecord(BaseModel):
    """Read-only view of one Gmail message, as needed for archiving."""

    id: str = Field(default="", description="Gmail message ID")
    thread_id: str | None = Field(default=None, description="Gmail thread ID")
    subject: str = Field(default="", description="Subject header")
    sender: str = Field(default="", description="Raw From header")

    to: str = Field(default="", description="Raw To header")
    cc: str = Field(default="", description="Raw Cc header")
    bcc: str = Field(default="", description="Raw Bcc header")
    reply_to: str = Field(default="", description="Raw Reply-To header")

    timestamp: datetime | None = Field(default=None, description="Message date")
    body_html: str = Field(default="", description="Raw HTML body")
    attachments: list[Attachment] = Field(default_factory=list, description="Attachments in API order")
