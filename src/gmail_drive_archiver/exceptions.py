"""Custom exceptions for Gmail Drive Archiver."""


class ArchiverError(Exception):
    """Base exception for all Gmail Drive Archiver errors."""


class ConfigurationError(ArchiverError):
    """Exception raised for configuration related errors."""


class AuthenticationError(ArchiverError):
    """Exception raised for authentication failures."""


class GmailAPIError(ArchiverError):
    """Exception raised for Gmail API related errors."""


class DriveAPIError(ArchiverError):
    """Exception raised for Google Drive API related errors."""


class RemoteListError(DriveAPIError):
    """Exception raised when a page of a Drive listing cannot be fetched."""


class DestinationMissingError(ArchiverError):
    """Exception raised when a destination name has no match in its catalog."""

    def __init__(self, name: str, kind: str = "folder") -> None:
        self.name = name
        self.kind = kind
        super().__init__(
            f"No {kind} named {name!r} was found. Please check the {kind} name and try again."
        )


class NotificationSendError(ArchiverError):
    """Exception raised when a notification email cannot be sent."""


class MissingInputError(ArchiverError):
    """Exception raised when a required user input is absent."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required input: {field}")


class UnknownActionError(ArchiverError):
    """Exception raised when no handler is registered for an action name."""
