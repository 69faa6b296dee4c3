"""Document assembly, upload and notification."""

from .assembler import DocumentAssembler
from .filenames import sanitize_filename
from .service import ArchiveService

__all__ = ["ArchiveService", "DocumentAssembler", "sanitize_filename"]
