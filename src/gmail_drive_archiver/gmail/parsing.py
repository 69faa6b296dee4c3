"""Helpers for parsing Gmail API messages (format=full) into internal models."""

from __future__ import annotations

import base64
import html
from collections.abc import Iterator
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from gmail_drive_archiver.models import Attachment, MessageRecord


def _header_map(message: dict[str, Any]) -> dict[str, str]:
    payload = message.get("payload") or {}
    headers = payload.get("headers") or []
    result: dict[str, str] = {}
    for h in headers:
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates; keep the first for now.
            result.setdefault(name.lower(), value)
    return result


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, OverflowError):
        return None
    # "-0000" means UTC with unknown origin; parsedate returns it naive.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _internal_date(message: dict[str, Any]) -> datetime | None:
    raw = message.get("internalDate")
    try:
        return datetime.fromtimestamp(int(raw) / 1000, tz=timezone.utc) if raw is not None else None
    except (TypeError, ValueError, OverflowError):
        return None


def decode_base64url(data: str) -> bytes:
    """Decode Gmail's unpadded base64url payload data."""

    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _walk_parts(part: dict[str, Any]) -> Iterator[dict[str, Any]]:
    yield part
    for child in part.get("parts") or []:
        yield from _walk_parts(child)


def iter_attachment_parts(message: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield payload parts that carry a named attachment, in API order."""

    payload = message.get("payload") or {}
    for part in _walk_parts(payload):
        if part.get("filename"):
            yield part


def extract_html_body(message: dict[str, Any]) -> str:
    """Return the HTML body of a message.

    Prefers the first ``text/html`` part; falls back to the first
    ``text/plain`` part wrapped in ``<pre>``.
    """

    payload = message.get("payload") or {}
    plain: str | None = None
    for part in _walk_parts(payload):
        if part.get("filename"):
            continue
        data = (part.get("body") or {}).get("data")
        if not data:
            continue
        mime_type = str(part.get("mimeType") or "").lower()
        text = decode_base64url(data).decode("utf-8", errors="replace")
        if mime_type == "text/html":
            return text
        if mime_type == "text/plain" and plain is None:
            plain = text

    if plain is None:
        return ""
    return f"<pre>{html.escape(plain)}</pre>"


def message_to_record(message: dict[str, Any], attachments: list[Attachment]) -> MessageRecord:
    """Convert a Gmail API message (format=full) to a MessageRecord.

    Args:
        message: Gmail API message dict.
        attachments: Decoded attachments of the message, in API order.

    Returns:
        MessageRecord: Parsed message.
    """

    hm = _header_map(message)

    return MessageRecord(
        id=str(message.get("id") or ""),
        thread_id=str(message.get("threadId") or "") or None,
        subject=hm.get("subject") or "",
        sender=hm.get("from") or "",
        to=hm.get("to") or "",
        cc=hm.get("cc") or "",
        bcc=hm.get("bcc") or "",
        reply_to=hm.get("reply-to") or "",
        timestamp=_parse_date(hm.get("date")) or _internal_date(message),
        body_html=extract_html_body(message),
        attachments=attachments,
    )
