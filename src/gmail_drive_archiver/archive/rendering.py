"""HTML fragments that make up an archived document."""

from __future__ import annotations

import base64
import html
from datetime import datetime
from zoneinfo import ZoneInfo

from gmail_drive_archiver.models import Attachment, MessageRecord

DIVIDER = '<hr class="message-divider">'

_DOCUMENT_START = (
    '<html><head><meta charset="utf-8"><style>'
    "body { font-family: Arial, sans-serif; font-size: 11pt; }"
    ".message-header p { margin: 2px 0; }"
    "</style></head><body>"
)
_DOCUMENT_END = "</body></html>"


def format_address(value: str) -> str:
    """Rewrite angle brackets so the PDF renderer does not read them as tags."""

    return value.replace("<", "(").replace(">", ")")


def format_date(value: datetime | None, timezone_name: str, date_format: str) -> str:
    if value is None:
        return ""
    return value.astimezone(ZoneInfo(timezone_name)).strftime(date_format)


def render_header(
    message: MessageRecord,
    *,
    timezone_name: str = "CET",
    date_format: str = "%d.%m.%Y %H:%M %Z",
) -> str:
    """Render the subject and address block of one message."""

    lines = [
        '<div class="message-header">',
        f"<h2>{html.escape(message.subject)}</h2>",
        f"<p><b>From:</b> {format_address(message.sender)}</p>",
        f"<p><b>Date:</b> {format_date(message.timestamp, timezone_name, date_format)}</p>",
    ]
    for label, value in (
        ("To", message.to),
        ("Cc", message.cc),
        ("Bcc", message.bcc),
        ("Reply-To", message.reply_to),
    ):
        if value:
            lines.append(f"<p><b>{label}:</b> {format_address(value)}</p>")
    lines.append("</div>")
    return "\n".join(lines)


def extract_body(raw: str) -> str:
    """Cut the body element out of a full HTML document.

    Returns the text from the first ``<body`` through the last ``</body>``,
    tags included. Without both tags the raw text is returned unchanged.
    """

    lowered = raw.lower()
    start = lowered.find("<body")
    end = lowered.rfind("</body>")
    if start == -1 or end == -1 or end < start:
        return raw
    return raw[start : end + len("</body>")]


def render_inline_image(attachment: Attachment) -> str:
    encoded = base64.b64encode(attachment.data).decode("ascii")
    return (
        f'<p><img src="data:{attachment.content_type};base64,{encoded}" '
        f'alt="{html.escape(attachment.filename, quote=True)}" '
        'style="max-width:100%;height:auto;"></p>'
    )


def render_attachment_link(filename: str, url: str) -> str:
    return f'<p><a href="{html.escape(url, quote=True)}">{html.escape(filename)}</a></p>'


def wrap_document(fragments: list[str]) -> str:
    return _DOCUMENT_START + "\n".join(fragments) + _DOCUMENT_END
