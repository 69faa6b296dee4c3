"""Data models for Gmail Drive Archiver.

This module contains Pydantic models for data validation and serialization.
"""

from gmail_drive_archiver.models.archive import (
    ArchiveRequest,
    ArchiveResult,
    AssembledDocument,
    UserSettings,
)
from gmail_drive_archiver.models.drive import (
    MISSING_ID,
    RemoteResource,
    ResourceCatalog,
    StoredFile,
)
from gmail_drive_archiver.models.message import Attachment, MessageRecord

__all__ = [
    "MISSING_ID",
    "ArchiveRequest",
    "ArchiveResult",
    "AssembledDocument",
    "Attachment",
    "MessageRecord",
    "RemoteResource",
    "ResourceCatalog",
    "StoredFile",
    "UserSettings",
]
