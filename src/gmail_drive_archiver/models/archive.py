"""Models describing archive requests, results and user preferences."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from gmail_drive_archiver.models.drive import StoredFile


@dataclass(frozen=True)
class AssembledDocument:
    """Finalized PDF document, ready for upload."""

    content: bytes
    filename: str
    html: str
    destination_folder_id: str
    attachment_folder_id: str | None = None

    @property
    def upload_folder_id(self) -> str:
        return self.attachment_folder_id or self.destination_folder_id


class UserSettings(BaseModel):
    """Per-user preferences, persisted in the settings store."""

    selected_drive_id: str = Field(default="", description="ID of the selected shared drive")
    save_whole_thread: bool = Field(
        default=False, description="Archive the whole thread instead of one message"
    )


class ArchiveRequest(BaseModel):
    """User input for one archive action."""

    message_id: str = Field(description="Gmail message ID the action was triggered on")
    folder_name: str = Field(description="Destination folder name in the selected drive")
    filename: str | None = Field(default=None, description="User supplied document name")
    notify: list[str] = Field(default_factory=list, description="Addresses to notify")
    notify_subject: str | None = Field(default=None, description="Notification subject override")
    notify_body: str | None = Field(default=None, description="Notification body override")


class ArchiveResult(BaseModel):
    """Outcome of a successful archive action."""

    file: StoredFile = Field(description="The uploaded PDF")
    filename: str = Field(description="Final document file name")
    attachment_folder_id: str | None = Field(default=None, description="Companion folder, if any")
    notified: bool = Field(default=False, description="Whether a notification was sent")
