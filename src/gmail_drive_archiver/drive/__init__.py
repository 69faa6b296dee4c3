"""Google Drive storage: listing, folder and file creation, PDF conversion."""

from .client import DriveClient
from .listing import list_resources

__all__ = ["DriveClient", "list_resources"]
