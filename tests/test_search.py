"""Tests for accent-insensitive workspace search."""

from pathlib import Path

import pytest

from docspace.errors import NotFound
from docspace.models import SearchResult
from docspace.search import make_snippet, normalize_text, rank_results, search


class TestNormalizeText:
    """Tests for normalize_text."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Café", "cafe"),
            ("CAFÉ", "cafe"),
            ("Crème Brûlée", "creme brulee"),
            ("plain", "plain"),
        ],
    )
    def test_accents_and_case_removed(self, raw, expected):
        assert normalize_text(raw) == expected


class TestMakeSnippet:
    """Tests for make_snippet."""

    def test_short_line_returned_whole(self):
        line = "a short line with the word target in it"
        assert make_snippet(line, "target") == line

    def test_long_line_windowed_with_ellipses(self):
        line = "a" * 120 + "target" + "b" * 120

        snippet = make_snippet(line, "target")

        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert "target" in snippet
        assert len(snippet) == 100 + 6

    def test_match_near_start_has_no_leading_ellipsis(self):
        line = "target " + "x" * 200

        snippet = make_snippet(line, "target")

        assert snippet.startswith("target")
        assert snippet.endswith("...")

    def test_window_follows_accented_match(self):
        line = "é" * 150 + "Café au lait" + "z" * 150

        snippet = make_snippet(line, normalize_text("cafe"))

        assert "Café" in snippet


class TestSearch:
    """Tests for search."""

    def test_short_query_returns_nothing(self, workspace: Path):
        assert search(workspace, "a") == []
        assert search(workspace, "ab") == []

    def test_three_byte_query_allowed(self, workspace: Path):
        # "é" is two bytes in UTF-8, so "éa" is long enough
        (workspace / "fée.md").write_text("", encoding="utf-8")

        assert [r.name for r in search(workspace, "éa")] == []
        assert [r.name for r in search(workspace, "fée")] == ["fée.md"]

    def test_filename_match_ignores_accents(self, workspace: Path):
        results = search(workspace, "MENU")

        assert results[0].match_type == "filename"
        assert results[0].name == "menu.md"

    def test_folder_match(self, workspace: Path):
        results = search(workspace, "cafe")

        assert [(r.name, r.match_type) for r in results] == [("menu.md", "folder")]

    def test_content_match_with_line_number(self, workspace: Path):
        results = search(workspace, "creme brulee")

        assert len(results) == 1
        hit = results[0]
        assert hit.match_type == "content"
        assert hit.line_number == 2
        assert hit.snippet == "Crème brûlée"

    def test_hidden_entries_not_searched(self, workspace: Path):
        assert search(workspace, "secret") == []
        assert search(workspace, "ignored") == []

    def test_filename_and_content_hits_for_same_document(self, workspace: Path):
        results = search(workspace, "plan")

        assert [(r.name, r.match_type) for r in results] == [
            ("plan.md", "filename"),
            ("plan.md", "content"),
        ]

    def test_ranking_filename_folder_content(self, workspace: Path):
        (workspace / "Espresso notes.md").write_text("", encoding="utf-8")
        (workspace / "Projects" / "espresso").mkdir()
        (workspace / "Projects" / "espresso" / "b.md").write_text("", encoding="utf-8")

        kinds = [r.match_type for r in search(workspace, "espresso")]

        assert kinds == ["filename", "folder", "content"]

    def test_content_hits_capped_per_document(self, temp_dir: Path):
        (temp_dir / "many.md").write_text("needle\n" * 20, encoding="utf-8")

        results = search(temp_dir, "needle")

        assert len(results) == 5
        assert [r.line_number for r in results] == [1, 2, 3, 4, 5]

    def test_global_cap(self, temp_dir: Path):
        for i in range(30):
            (temp_dir / f"needle{i:02d}.md").write_text("needle\nneedle\n", encoding="utf-8")

        results = search(temp_dir, "needle")

        assert len(results) == 50

    def test_undecodable_document_content_skipped(self, temp_dir: Path):
        (temp_dir / "bin.md").write_bytes(b"needle \xff\xfe")
        (temp_dir / "needle-raw.md").write_bytes(b"needle \xff\xfe")
        (temp_dir / "ok.md").write_text("needle", encoding="utf-8")

        results = search(temp_dir, "needle")

        assert [(r.name, r.match_type) for r in results] == [
            ("needle-raw.md", "filename"),
            ("ok.md", "content"),
        ]

    def test_crlf_lines(self, temp_dir: Path):
        (temp_dir / "win.md").write_text("one\r\ntwo needle\r\n", encoding="utf-8")

        results = search(temp_dir, "needle")

        assert results[0].line_number == 2
        assert results[0].snippet == "two needle"

    def test_missing_root(self, temp_dir: Path):
        with pytest.raises(NotFound):
            search(temp_dir / "missing", "anything")


class TestRankResults:
    """Tests for rank_results."""

    def test_ties_broken_by_name(self):
        results = [
            SearchResult(name="b.md", path="/b.md", match_type="content", snippet="x", line_number=1),
            SearchResult(name="a.md", path="/a.md", match_type="content", snippet="x", line_number=1),
            SearchResult(name="z.md", path="/z.md", match_type="filename"),
        ]

        assert [r.name for r in rank_results(results)] == ["z.md", "a.md", "b.md"]
