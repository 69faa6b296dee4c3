"""Gmail access: reading messages and sending notifications."""

from .client import GmailClient

__all__ = ["GmailClient"]
