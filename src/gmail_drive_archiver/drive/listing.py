"""Paged enumeration of Drive listing endpoints."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from gmail_drive_archiver.exceptions import RemoteListError

logger = structlog.get_logger()

FetchPage = Callable[[str | None], dict[str, Any]]


def list_resources(fetch_page: FetchPage, items_key: str) -> list[dict[str, Any]]:
    """Collect every item of a paged listing.

    Args:
        fetch_page: Called with the continuation token (None for the first
            page); returns the raw API response.
        items_key: Response key holding the page items ("files", "drives").

    Returns:
        All items, concatenated in the order the pages were received.

    Raises:
        RemoteListError: If any page request fails. Items from earlier pages
            are discarded.
    """

    items: list[dict[str, Any]] = []
    page_token: str | None = None
    page_count = 0

    while True:
        page_count += 1
        try:
            response = fetch_page(page_token)
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "drive_list_page_failed", items_key=items_key, page=page_count, error=str(exc)
            )
            raise RemoteListError(f"Listing {items_key} failed on page {page_count}: {exc}") from exc

        items.extend(response.get(items_key, []) or [])
        page_token = response.get("nextPageToken")
        if not page_token:
            break

    logger.info("drive_list_complete", items_key=items_key, pages=page_count, item_count=len(items))
    return items
