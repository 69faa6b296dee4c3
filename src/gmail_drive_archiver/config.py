"""Configuration management for Gmail Drive Archiver.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the DRIVE_ARCHIVER_ prefix (e.g., DRIVE_ARCHIVER_LOG_LEVEL).
    """

    model_config = SettingsConfigDict(
        env_prefix="DRIVE_ARCHIVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google Configuration
    google_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to the Google OAuth client secrets file",
    )
    google_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to the cached Google OAuth token file",
    )
    google_scopes: list[str] = Field(
        default=[
            "https://www.googleapis.com/auth/gmail.readonly",
            "https://www.googleapis.com/auth/gmail.send",
            "https://www.googleapis.com/auth/drive",
        ],
        description="OAuth scopes requested for Gmail and Drive access",
    )
    gmail_user_id: str = Field(
        default="me",
        description="Gmail user id used for API calls",
    )

    # Drive Configuration
    drive_page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Number of folders or shared drives requested per listing call",
    )

    # Document Configuration
    display_timezone: str = Field(
        default="CET",
        description=(
            "Timezone used to print message dates in archived documents. "
            "Not derived from the account locale."
        ),
    )
    date_format: str = Field(
        default="%d.%m.%Y %H:%M %Z",
        description="strftime format for message dates in archived documents",
    )

    # Notification Configuration
    notification_subject: str = Field(
        default="Email archived to Google Drive",
        description="Default subject of the notification email",
    )
    notification_body: str = Field(
        default="An email has been archived to Google Drive.",
        description="Default body text of the notification email",
    )

    # User settings store
    settings_db_path: Path = Field(
        default=Path("archiver_settings.sqlite3"),
        description="Path to the SQLite database holding per-user settings",
    )
    user_key: str = Field(
        default="me",
        description="Key identifying the current user in the settings store",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
