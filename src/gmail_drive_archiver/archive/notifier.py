"""Best-effort notification emails for archived documents."""

from __future__ import annotations

import html
from typing import Protocol

import structlog

from gmail_drive_archiver.exceptions import NotificationSendError
from gmail_drive_archiver.models import StoredFile

logger = structlog.get_logger()


class MailSender(Protocol):
    async def send_email(self, to: list[str], subject: str, html_body: str) -> None: ...


def render_notification(body: str, document: StoredFile) -> str:
    return (
        f"<p>{html.escape(body)}</p>"
        f'<p><a href="{html.escape(document.url, quote=True)}">{html.escape(document.name)}</a></p>'
    )


async def notify_recipients(
    sender: MailSender,
    recipients: list[str],
    document: StoredFile,
    subject: str,
    body: str,
) -> bool:
    """Email a link to ``document`` to ``recipients``.

    Send failures are logged and reported as ``False``; they never fail the
    archive action.

    Returns:
        True if a notification was sent.
    """

    if not recipients:
        return False

    try:
        await sender.send_email(recipients, subject, render_notification(body, document))
    except NotificationSendError as exc:
        logger.warning("notification_send_failed", recipient_count=len(recipients), error=str(exc))
        return False

    logger.info("notification_sent", recipient_count=len(recipients), file_id=document.id)
    return True
