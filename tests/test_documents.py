"""Tests for document-level file operations."""

import os
from pathlib import Path

import pytest

from docspace.documents import (
    create_document,
    create_folder,
    delete_document,
    delete_folder,
    list_files,
    list_files_in_folder,
    read_document,
    write_document,
)
from docspace.errors import InvalidArgument, IoFailure, NotFound


class TestListing:
    """Tests for list_files and list_files_in_folder."""

    def test_list_files_newest_first(self, workspace: Path):
        os.utime(workspace / "a.md", (1_000_000, 1_000_000))
        os.utime(workspace / "z.md", (2_000_000, 2_000_000))

        files = list_files(workspace)

        assert [f.name for f in files] == ["z.md", "a.md"]
        assert files[0].modified == 2_000_000
        assert files[0].preview == ""

    def test_list_files_in_folder_by_name_with_previews(self, workspace: Path):
        files = list_files_in_folder(workspace)

        assert [f.name for f in files] == ["a.md", "z.md"]
        assert files[0].preview.startswith("# A")

    def test_listing_is_not_recursive(self, workspace: Path):
        assert [f.name for f in list_files(workspace / "Projects")] == ["plan.md"]

    def test_missing_folder(self, temp_dir: Path):
        with pytest.raises(NotFound):
            list_files(temp_dir / "missing")


class TestReadWrite:
    """Tests for read_document and write_document."""

    def test_read(self, workspace: Path):
        doc = read_document(workspace / "a.md")

        assert doc.name == "a.md"
        assert doc.content == "# A\nfirst document\n"

    def test_read_missing(self, workspace: Path):
        with pytest.raises(NotFound):
            read_document(workspace / "missing.md")

    def test_read_non_utf8(self, workspace: Path):
        (workspace / "bad.md").write_bytes(b"\xff\xfe")

        with pytest.raises(IoFailure):
            read_document(workspace / "bad.md")

    def test_write_replaces_content(self, workspace: Path):
        write_document(workspace / "a.md", "new text")

        assert (workspace / "a.md").read_text(encoding="utf-8") == "new text"

    def test_write_into_missing_folder(self, workspace: Path):
        with pytest.raises(NotFound):
            write_document(workspace / "Nowhere" / "x.md", "text")

    def test_write_onto_folder(self, workspace: Path):
        with pytest.raises(InvalidArgument):
            write_document(workspace / "Archive", "text")


class TestCreate:
    """Tests for create_document and create_folder."""

    def test_untitled_numbering(self, workspace: Path):
        first = create_document(workspace)
        second = create_document(workspace)

        assert first.name == "Untitled-1.md"
        assert second.name == "Untitled-2.md"
        assert (workspace / "Untitled-2.md").read_text(encoding="utf-8") == ""

    def test_untitled_fills_gaps(self, workspace: Path):
        (workspace / "Untitled-2.md").touch()

        assert create_document(workspace).name == "Untitled-1.md"
        assert create_document(workspace).name == "Untitled-3.md"

    def test_new_folder_numbering(self, workspace: Path):
        assert create_folder(workspace) == workspace / "New Folder"
        assert create_folder(workspace) == workspace / "New Folder1"

    def test_named_folder(self, workspace: Path):
        assert create_folder(workspace, "Archive") == workspace / "Archive1"


class TestDelete:
    """Tests for delete_document and delete_folder."""

    def test_delete_document(self, workspace: Path):
        delete_document(workspace / "a.md")

        assert not (workspace / "a.md").exists()

    def test_delete_missing_document(self, workspace: Path):
        with pytest.raises(NotFound):
            delete_document(workspace / "missing.md")

    def test_delete_folder_recursively(self, workspace: Path):
        delete_folder(workspace / "Projects", root=workspace)

        assert not (workspace / "Projects").exists()

    def test_root_cannot_be_deleted(self, workspace: Path):
        with pytest.raises(InvalidArgument):
            delete_folder(workspace, root=workspace)
        assert workspace.is_dir()

    def test_root_reached_through_parent_reference(self, workspace: Path):
        before = sorted(p.name for p in workspace.iterdir())

        with pytest.raises(InvalidArgument):
            delete_folder(workspace / "Archive" / "..", root=workspace)
        with pytest.raises(InvalidArgument):
            delete_folder(workspace / "Projects" / "Café" / ".." / "..", root=workspace)

        assert sorted(p.name for p in workspace.iterdir()) == before

    def test_folder_above_root_cannot_be_deleted(self, workspace: Path):
        with pytest.raises(InvalidArgument):
            delete_folder(workspace.parent, root=workspace)
        assert (workspace / "a.md").is_file()
