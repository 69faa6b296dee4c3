"""Unit tests for the document assembler."""

import pytest

from gmail_drive_archiver.archive import DocumentAssembler
from gmail_drive_archiver.archive.rendering import DIVIDER
from gmail_drive_archiver.exceptions import DestinationMissingError, MissingInputError
from gmail_drive_archiver.models import ResourceCatalog


class TestDocumentAssembler:
    """Test suite for DocumentAssembler."""

    @pytest.mark.asyncio
    async def test_single_message_without_attachments(self, fake_drive, folders, thread_messages) -> None:
        assembler = DocumentAssembler(fake_drive)

        document = await assembler.assemble(thread_messages[:1], "Invoices", ResourceCatalog(folders))

        assert "Quarterly numbers" in document.html
        assert "Alice Example (alice@example.com)" in document.html
        assert "<p>Here are the numbers.</p>" in document.html
        assert "<a href" not in document.html
        assert DIVIDER not in document.html
        assert document.attachment_folder_id is None
        assert document.destination_folder_id == "fld-invoices"
        assert document.filename == "Quarterly numbers.pdf"
        assert document.content == b"%PDF-1.4 fake"
        assert fake_drive.created_folders == []
        assert len(fake_drive.converted) == 1

    @pytest.mark.asyncio
    async def test_thread_with_mixed_attachments(self, fake_drive, folders, thread_messages) -> None:
        assembler = DocumentAssembler(fake_drive)

        document = await assembler.assemble(thread_messages, "Contracts", ResourceCatalog(folders))

        assert fake_drive.created_folders == [("Quarterly numbers", "fld-contracts")]
        assert document.attachment_folder_id == "folder-1"
        assert fake_drive.created_files == [
            ("report.pdf", "folder-1", b"%PDF report", "application/pdf")
        ]
        assert document.html.count("<img") == 1
        assert document.html.count("<a href") == 1
        assert document.html.count(DIVIDER) == 2
        assert '<a href="https://drive.test/file-1">report.pdf</a>' in document.html

    @pytest.mark.asyncio
    async def test_attachment_folder_is_shared_across_messages(
        self, fake_drive, folders, thread_messages
    ) -> None:
        extra = thread_messages[1].attachments[0].model_copy(update={"filename": "annex.docx"})
        thread_messages[2].attachments.append(extra)
        assembler = DocumentAssembler(fake_drive)

        await assembler.assemble(thread_messages, "Contracts", ResourceCatalog(folders))

        assert len(fake_drive.created_folders) == 1
        assert [(name, parent) for name, parent, _, _ in fake_drive.created_files] == [
            ("report.pdf", "folder-1"),
            ("annex.docx", "folder-1"),
        ]

    @pytest.mark.asyncio
    async def test_thread_name_uses_first_subject(self, fake_drive, folders, thread_messages) -> None:
        assembler = DocumentAssembler(fake_drive)

        document = await assembler.assemble(
            list(reversed(thread_messages)), "Archive", ResourceCatalog(folders)
        )

        assert document.filename == "Re: Quarterly numbers.pdf"

    @pytest.mark.asyncio
    async def test_user_filename_is_sanitized(self, fake_drive, folders, thread_messages) -> None:
        assembler = DocumentAssembler(fake_drive)

        document = await assembler.assemble(
            thread_messages, "Archive", ResourceCatalog(folders), filename="Report: Q1/Q2 (final)"
        )

        assert document.filename == "Report Q1Q2 final.pdf"
        assert fake_drive.created_folders == [("Report Q1Q2 final", "fld-archive")]

    @pytest.mark.asyncio
    async def test_missing_destination_makes_no_remote_calls(
        self, fake_drive, folders, thread_messages
    ) -> None:
        assembler = DocumentAssembler(fake_drive)

        with pytest.raises(DestinationMissingError) as excinfo:
            await assembler.assemble(thread_messages, "invoices", ResourceCatalog(folders))

        assert excinfo.value.name == "invoices"
        assert fake_drive.call_count == 0

    @pytest.mark.asyncio
    async def test_empty_message_list_is_rejected(self, fake_drive, folders) -> None:
        assembler = DocumentAssembler(fake_drive)

        with pytest.raises(MissingInputError):
            await assembler.assemble([], "Invoices", ResourceCatalog(folders))

    @pytest.mark.asyncio
    async def test_upload_targets_attachment_folder(self, fake_drive, folders, thread_messages) -> None:
        assembler = DocumentAssembler(fake_drive)
        document = await assembler.assemble(thread_messages, "Contracts", ResourceCatalog(folders))

        stored = await assembler.upload(document)

        name, parent, content, mime_type = fake_drive.created_files[-1]
        assert (name, parent, mime_type) == ("Quarterly numbers.pdf", "folder-1", "application/pdf")
        assert content == document.content
        assert stored.id == "file-2"

    @pytest.mark.asyncio
    async def test_upload_targets_destination_without_attachments(
        self, fake_drive, folders, thread_messages
    ) -> None:
        assembler = DocumentAssembler(fake_drive)
        document = await assembler.assemble(thread_messages[:1], "Invoices", ResourceCatalog(folders))

        await assembler.upload(document)

        assert fake_drive.created_files[-1][1] == "fld-invoices"
