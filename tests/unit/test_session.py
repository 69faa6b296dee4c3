"""Unit tests for session state and catalog caching."""

import pytest

from gmail_drive_archiver.models import UserSettings
from gmail_drive_archiver.session import ArchiveSession
from gmail_drive_archiver.settings_store import UserSettingsStore


@pytest.fixture
def store(tmp_path) -> UserSettingsStore:
    store = UserSettingsStore(tmp_path / "settings.sqlite3")
    store.initialize()
    return store


@pytest.mark.asyncio
async def test_shared_drives_are_listed_once(fake_drive, store) -> None:
    session = ArchiveSession(fake_drive, store, "me")

    first = await session.shared_drives()
    second = await session.shared_drives()

    assert first is second
    assert first.names() == ["Finance", "Legal"]
    assert fake_drive.list_drive_calls == 1


@pytest.mark.asyncio
async def test_folders_empty_without_selected_drive(fake_drive, store) -> None:
    session = ArchiveSession(fake_drive, store, "me")

    assert len(await session.folders()) == 0
    assert fake_drive.list_folder_calls == []


@pytest.mark.asyncio
async def test_folders_listed_once_for_selected_drive(fake_drive, store) -> None:
    store.save("me", UserSettings(selected_drive_id="drv-finance"))
    session = ArchiveSession(fake_drive, store, "me")

    await session.folders()
    catalog = await session.folders()

    assert catalog.resolve("Invoices") == "fld-invoices"
    assert fake_drive.list_folder_calls == ["drv-finance"]


@pytest.mark.asyncio
async def test_changing_drive_lists_folders_of_new_drive(fake_drive, store) -> None:
    store.save("me", UserSettings(selected_drive_id="drv-finance"))
    session = ArchiveSession(fake_drive, store, "me")
    await session.folders()

    session.save_settings(UserSettings(selected_drive_id="drv-legal"))
    await session.folders()

    assert fake_drive.list_folder_calls == ["drv-finance", "drv-legal"]
    assert store.load("me").selected_drive_id == "drv-legal"


@pytest.mark.asyncio
async def test_toggling_thread_mode_keeps_folder_catalog(fake_drive, store) -> None:
    store.save("me", UserSettings(selected_drive_id="drv-finance"))
    session = ArchiveSession(fake_drive, store, "me")
    await session.folders()

    session.save_settings(UserSettings(selected_drive_id="drv-finance", save_whole_thread=True))
    await session.folders()

    assert fake_drive.list_folder_calls == ["drv-finance"]
    assert session.user_settings.save_whole_thread is True
