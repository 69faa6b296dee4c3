"""Gmail Drive Archiver - save Gmail messages as PDF files in Google Drive.

This package archives a Gmail message (or its whole thread) as a PDF document
into a folder of a Google Drive shared drive, extracting non-image attachments
into a companion folder and optionally notifying recipients by email.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from gmail_drive_archiver.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
