"""Document file naming."""

from __future__ import annotations

# Characters that are unsafe in file names on at least one common platform.
FORBIDDEN_CHARACTERS = "&/\\|#,+()$~%.'\":*?<>{}"

_TRANSLATION = str.maketrans("", "", FORBIDDEN_CHARACTERS)

PDF_EXTENSION = ".pdf"
NO_SUBJECT = "(no subject)"


def sanitize_filename(name: str) -> str:
    """Remove every forbidden character from a user supplied name."""

    return name.translate(_TRANSLATION)


def document_basename(user_filename: str | None, first_subject: str) -> str:
    """Pick the document name, without extension.

    A user supplied name is sanitized; the subject fallback is used verbatim.
    """

    if user_filename is not None:
        sanitized = sanitize_filename(user_filename).strip()
        if sanitized:
            return sanitized
    return first_subject or NO_SUBJECT
