"""Action handlers keyed by action name.

A host (the CLI, or any UI) turns a user interaction into an `ActionEvent`
and calls `dispatch`. Handlers read only the form values they need and return
a plain `ActionResponse`; rendering it is up to the host.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, Field

from gmail_drive_archiver.archive import ArchiveService
from gmail_drive_archiver.exceptions import (
    ArchiverError,
    DestinationMissingError,
    MissingInputError,
    UnknownActionError,
)
from gmail_drive_archiver.models import MISSING_ID, ArchiveRequest, UserSettings
from gmail_drive_archiver.session import ArchiveSession

logger = structlog.get_logger()

_TRUE_VALUES = frozenset({"true", "on", "1", "yes"})


class ActionEvent(BaseModel):
    """A user action as delivered by the host."""

    action: str = Field(description="Registered action name")
    message_id: str | None = Field(default=None, description="Message the action was triggered on")
    form_inputs: dict[str, str] = Field(default_factory=dict, description="Form field values")


class ActionResponse(BaseModel):
    """Host-agnostic result of an action."""

    notification: str = Field(default="", description="Text to show to the user")
    suggestions: list[str] = Field(default_factory=list, description="Autocomplete suggestions")
    data: dict[str, Any] = Field(default_factory=dict, description="Structured result values")
    error: bool = Field(default=False, description="Whether the action failed")


@dataclass
class ActionContext:
    session: ArchiveSession
    archive_service: ArchiveService


Handler = Callable[[ActionEvent, ActionContext], Awaitable[ActionResponse]]


def optional_field(event: ActionEvent, name: str) -> str | None:
    """Return a stripped form value, or None when absent or blank."""

    value = event.form_inputs.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def required_field(event: ActionEvent, name: str) -> str:
    value = optional_field(event, name)
    if value is None:
        raise MissingInputError(name)
    return value


REQUIRED_INPUTS: dict[str, tuple[str, ...]] = {
    "save_settings": ("drive_name",),
    "archive": ("folder_name",),
}


def check_required_inputs(event: ActionEvent) -> None:
    """Raise MissingInputError for the first blank input the action requires.

    Needs no remote access, so hosts can call it before authenticating.
    """

    for name in REQUIRED_INPUTS.get(event.action, ()):
        required_field(event, name)


def parse_addresses(value: str | None) -> list[str]:
    if value is None:
        return []
    return [a.strip() for a in value.replace(";", ",").split(",") if a.strip()]


async def load_settings(event: ActionEvent, ctx: ActionContext) -> ActionResponse:
    drives = await ctx.session.shared_drives()
    current = ctx.session.user_settings
    selected_name = next(
        (d.name for d in drives if d.id == current.selected_drive_id),
        "",
    )
    return ActionResponse(
        suggestions=drives.names(),
        data={
            "selected_drive_id": current.selected_drive_id,
            "selected_drive_name": selected_name,
            "save_whole_thread": current.save_whole_thread,
        },
    )


async def save_settings(event: ActionEvent, ctx: ActionContext) -> ActionResponse:
    drive_name = required_field(event, "drive_name")
    whole_thread = (optional_field(event, "save_whole_thread") or "").lower() in _TRUE_VALUES

    drives = await ctx.session.shared_drives()
    drive_id = drives.resolve(drive_name)
    if drive_id == MISSING_ID:
        raise DestinationMissingError(drive_name, kind="shared drive")

    ctx.session.save_settings(UserSettings(selected_drive_id=drive_id, save_whole_thread=whole_thread))
    return ActionResponse(
        notification="Settings saved.",
        data={"selected_drive_id": drive_id, "save_whole_thread": whole_thread},
    )


async def suggest_folders(event: ActionEvent, ctx: ActionContext) -> ActionResponse:
    fragment = optional_field(event, "folder_name") or ""
    folders = await ctx.session.folders()
    return ActionResponse(suggestions=folders.suggest(fragment))


async def archive(event: ActionEvent, ctx: ActionContext) -> ActionResponse:
    folder_name = required_field(event, "folder_name")
    if not event.message_id:
        raise MissingInputError("message_id")

    request = ArchiveRequest(
        message_id=event.message_id,
        folder_name=folder_name,
        filename=optional_field(event, "filename"),
        notify=parse_addresses(optional_field(event, "notify")),
        notify_subject=optional_field(event, "notify_subject"),
        notify_body=optional_field(event, "notify_body"),
    )
    result = await ctx.archive_service.archive(request)
    return ActionResponse(
        notification=f"Saved {result.filename} to Google Drive.",
        data={
            "file_id": result.file.id,
            "url": result.file.url,
            "filename": result.filename,
            "attachment_folder_id": result.attachment_folder_id,
            "notified": result.notified,
        },
    )


HANDLERS: dict[str, Handler] = {
    "load_settings": load_settings,
    "save_settings": save_settings,
    "suggest_folders": suggest_folders,
    "archive": archive,
}


async def dispatch(event: ActionEvent, ctx: ActionContext) -> ActionResponse:
    """Run the handler registered for ``event.action``.

    Archiver errors are returned as an error response carrying the message to
    show to the user.

    Raises:
        UnknownActionError: If no handler is registered for the action.
    """

    handler = HANDLERS.get(event.action)
    if handler is None:
        raise UnknownActionError(f"Unknown action: {event.action}")

    logger.info("action_dispatched", action=event.action, message_id=event.message_id)
    try:
        check_required_inputs(event)
        return await handler(event, ctx)
    except ArchiverError as exc:
        logger.warning("action_failed", action=event.action, error=str(exc))
        return ActionResponse(notification=str(exc), error=True)
