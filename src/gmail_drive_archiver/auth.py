"""Google OAuth helpers shared by the Gmail and Drive clients."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from gmail_drive_archiver.config import Settings
from gmail_drive_archiver.exceptions import ConfigurationError

logger = structlog.get_logger()


def load_credentials(credentials_path: Path, token_path: Path, scopes: list[str]) -> Any:
    """Load cached OAuth credentials, refreshing or re-authorizing as needed.

    Args:
        credentials_path: OAuth client secrets file.
        token_path: Cached token file; written after a new authorization.
        scopes: OAuth scopes to request.

    Returns:
        google.oauth2.credentials.Credentials

    Raises:
        ConfigurationError: If the client secrets file does not exist.
    """

    # Imported lazily to keep import-time cost low and tests fast.
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials
    from google_auth_oauthlib.flow import InstalledAppFlow

    if not credentials_path.exists():
        raise ConfigurationError(
            f"Google credentials file not found: {credentials_path}. "
            "Create an OAuth client for a desktop app and download its JSON."
        )

    creds: Credentials | None = None
    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), scopes=scopes)

    if creds is not None and creds.expired and creds.refresh_token:
        logger.info("google_token_refresh", token_path=str(token_path))
        creds.refresh(Request())

    if creds is None or not creds.valid:
        logger.info("google_authorization_flow_started", scopes=scopes)
        flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=scopes)
        creds = flow.run_local_server(port=0)
        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_text(creds.to_json(), encoding="utf-8")

    return creds


def build_service(api: str, version: str, settings: Settings) -> Any:
    """Build an authorized Google API service object."""

    from googleapiclient.discovery import build

    creds = load_credentials(
        Path(settings.google_credentials_path),
        Path(settings.google_token_path),
        list(settings.google_scopes),
    )
    # cache_discovery=False prevents writing discovery docs to disk.
    return build(api, version, credentials=creds, cache_discovery=False)
