"""Command-line interface for Gmail Drive Archiver.

This module provides the main entry point for the CLI application. Every
command is routed through the action handler table, so the CLI behaves like
any other host.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import structlog

from gmail_drive_archiver import __version__
from gmail_drive_archiver.archive import ArchiveService
from gmail_drive_archiver.config import Settings, get_settings
from gmail_drive_archiver.drive import DriveClient
from gmail_drive_archiver.exceptions import ArchiverError, MissingInputError
from gmail_drive_archiver.gmail import GmailClient
from gmail_drive_archiver.handlers import (
    ActionContext,
    ActionEvent,
    ActionResponse,
    check_required_inputs,
    dispatch,
)
from gmail_drive_archiver.session import ArchiveSession
from gmail_drive_archiver.settings_store import UserSettingsStore

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gmail-drive-archiver",
        description="Archive Gmail messages as PDF files in Google Drive",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("drives", help="List shared drives and show the selected one")

    folders_parser = subparsers.add_parser("folders", help="List folders of the selected drive")
    folders_parser.add_argument(
        "fragment",
        nargs="?",
        default="",
        help="Only show folders whose name contains this text",
    )

    settings_parser = subparsers.add_parser("settings", help="Show or change user settings")
    settings_sub = settings_parser.add_subparsers(dest="settings_command", required=True)
    settings_sub.add_parser("show", help="Show the current settings")
    set_parser = settings_sub.add_parser("set", help="Select a shared drive and thread mode")
    set_parser.add_argument("--drive", required=True, help="Shared drive name")
    set_parser.add_argument(
        "--whole-thread",
        action="store_true",
        help="Archive the whole thread instead of a single message",
    )

    archive_parser = subparsers.add_parser("archive", help="Archive a message as PDF")
    archive_parser.add_argument("message_id", help="Gmail message ID")
    archive_parser.add_argument("--folder", default="", help="Destination folder name")
    archive_parser.add_argument("--filename", default=None, help="Document name (default: subject)")
    archive_parser.add_argument(
        "--notify",
        action="append",
        default=[],
        help="Address to notify; may be repeated",
    )
    archive_parser.add_argument("--notify-subject", default=None, help="Notification subject")
    archive_parser.add_argument("--notify-body", default=None, help="Notification body text")

    return parser


def _to_event(args: argparse.Namespace) -> ActionEvent:
    if args.command == "drives" or (
        args.command == "settings" and args.settings_command == "show"
    ):
        return ActionEvent(action="load_settings")

    if args.command == "folders":
        return ActionEvent(action="suggest_folders", form_inputs={"folder_name": args.fragment})

    if args.command == "settings":
        inputs = {"drive_name": args.drive}
        if args.whole_thread:
            inputs["save_whole_thread"] = "true"
        return ActionEvent(action="save_settings", form_inputs=inputs)

    inputs = {"folder_name": args.folder}
    if args.filename is not None:
        inputs["filename"] = args.filename
    if args.notify:
        inputs["notify"] = ",".join(args.notify)
    if args.notify_subject is not None:
        inputs["notify_subject"] = args.notify_subject
    if args.notify_body is not None:
        inputs["notify_body"] = args.notify_body
    return ActionEvent(action="archive", message_id=args.message_id, form_inputs=inputs)


async def _build_context(settings: Settings) -> ActionContext:
    store = UserSettingsStore(settings.settings_db_path)
    store.initialize()

    gmail = GmailClient(settings)
    drive = DriveClient(settings)
    await gmail.authenticate()
    await drive.authenticate()

    session = ArchiveSession(drive, store, settings.user_key)
    return ActionContext(session=session, archive_service=ArchiveService(gmail, session, settings))


def _print_response(args: argparse.Namespace, response: ActionResponse) -> None:
    if response.notification:
        print(response.notification)

    if args.command == "drives":
        selected = response.data.get("selected_drive_name")
        for name in response.suggestions:
            marker = "*" if name == selected else " "
            print(f"{marker} {name}")
    elif args.command == "folders":
        for name in response.suggestions:
            print(name)
    elif args.command == "settings" and args.settings_command == "show":
        print(f"Shared drive: {response.data.get('selected_drive_name') or '(none)'}")
        print(f"Save whole thread: {'yes' if response.data.get('save_whole_thread') else 'no'}")
    elif args.command == "archive" and not response.error:
        print(response.data.get("url", ""))


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    # Required input is checked before authenticating or touching any API.
    event = _to_event(args)
    try:
        check_required_inputs(event)
    except MissingInputError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        ctx = await _build_context(settings)
    except ArchiverError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    response = await dispatch(event, ctx)
    _print_response(args, response)
    return 1 if response.error else 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Gmail Drive Archiver CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    logger.info("gmail_drive_archiver_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    return asyncio.run(_run(parsed, settings))


if __name__ == "__main__":
    sys.exit(main())
