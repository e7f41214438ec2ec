"""Tests for directory listings."""

import os
import re
from pathlib import Path
from unittest.mock import patch

import pytest
from wikiserve.core.errors import DirectoryReadError
from wikiserve.core.listing import child_href, display_name, list_directory, render_listing

ANCHOR_RE = re.compile(r'<a href="([^"]*)">([^<]*)</a><br>')


def make_undecodable_file(directory: Path) -> None:
    """Create a file whose name is not valid UTF-8, or skip the test."""
    try:
        fd = os.open(os.path.join(os.fsencode(directory), b"bad\xff.txt"), os.O_CREAT | os.O_WRONLY)
    except OSError:
        pytest.skip("filesystem rejects names that are not valid UTF-8")
    os.close(fd)


class TestChildHref:
    """Tests for child_href()."""

    def test__trailing_slash__joins_once(self) -> None:
        """Join without doubling the separator."""
        assert child_href("/pages/", "a.txt") == "/pages/a.txt"

    def test__no_trailing_slash__adds_separator(self) -> None:
        """Insert a separator when the request path lacks one."""
        assert child_href("/pages/notes", "a.txt") == "/pages/notes/a.txt"

    def test__special_characters__are_percent_encoded(self) -> None:
        """Percent-encode characters that are unsafe in URLs."""
        assert child_href("/pages/", "my notes #1?.txt") == "/pages/my%20notes%20%231%3F.txt"

    def test__non_ascii_name__is_percent_encoded(self) -> None:
        """Encode non-ASCII names as UTF-8 percent escapes."""
        assert child_href("/pages/", "café") == "/pages/caf%C3%A9"

    def test__undecodable_name__keeps_original_bytes(self) -> None:
        """Encode undecodable filename bytes as their original percent escapes."""
        assert child_href("/pages/", "bad\udcff.txt") == "/pages/bad%FF.txt"


class TestDisplayName:
    """Tests for display_name()."""

    def test__valid_name__unchanged(self) -> None:
        """Leave valid UTF-8 names alone."""
        assert display_name("café.txt") == "café.txt"

    def test__undecodable_bytes__shown_as_replacement(self) -> None:
        """Show undecodable bytes as replacement characters."""
        assert display_name("bad\udcff.txt") == "bad\ufffd.txt"


class TestListDirectory:
    """Tests for list_directory()."""

    def test__children__sorted_by_name(self, tmp_path: Path) -> None:
        """List children in lexicographic order."""
        for name in ["c.txt", "a.txt", "b.txt"]:
            (tmp_path / name).write_text(name)

        entries = list_directory(tmp_path, "/pages/")

        assert [e.name for e in entries] == ["a.txt", "b.txt", "c.txt"]

    def test__nested_directories__not_recursed(self, tmp_path: Path) -> None:
        """List only immediate children."""
        (tmp_path / "sub" / "deep").mkdir(parents=True)
        (tmp_path / "sub" / "deep" / "x.txt").write_text("x")

        entries = list_directory(tmp_path, "/pages/")

        assert [e.name for e in entries] == ["sub"]

    def test__missing_directory__raises_directory_read_error(self, tmp_path: Path) -> None:
        """Raise DirectoryReadError when the directory can not be read."""
        with pytest.raises(DirectoryReadError, match="can not read from directory"):
            list_directory(tmp_path / "missing", "/pages/missing")

    def test__permission_error__raises_directory_read_error(self, tmp_path: Path) -> None:
        """Raise DirectoryReadError when permissions were revoked."""
        with (
            patch("wikiserve.core.listing.os.scandir", side_effect=PermissionError(13, "denied")),
            pytest.raises(DirectoryReadError) as exc_info,
        ):
            list_directory(tmp_path, "/pages/")

        assert isinstance(exc_info.value.__cause__, PermissionError)


class TestRenderListing:
    """Tests for render_listing()."""

    def test__file_and_directory__one_anchor_each(self, tmp_path: Path) -> None:
        """Emit exactly one anchor per child with joined href and raw name."""
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b").mkdir()

        html = render_listing(tmp_path, "/pages/")

        anchors = ANCHOR_RE.findall(html)
        assert sorted(anchors) == [("/pages/a.txt", "a.txt"), ("/pages/b", "b")]

    def test__document__has_minimal_html_shell(self, tmp_path: Path) -> None:
        """Wrap links in a doctype, head with charset and body."""
        html = render_listing(tmp_path, "/pages/")

        assert html.startswith("<!DOCTYPE html>")
        assert '<meta charset="utf-8">' in html
        assert "<body>" in html
        assert html.rstrip().endswith("</html>")

    def test__empty_directory__has_no_anchors(self, tmp_path: Path) -> None:
        """Render an empty listing without anchors."""
        html = render_listing(tmp_path, "/pages/")

        assert ANCHOR_RE.findall(html) == []

    def test__markup_in_name__is_escaped_in_text(self, tmp_path: Path) -> None:
        """Escape names so they display literally."""
        (tmp_path / "a&b.txt").write_text("x")

        html = render_listing(tmp_path, "/pages/")

        assert '<a href="/pages/a%26b.txt">a&amp;b.txt</a><br>' in html

    def test__each_anchor__followed_by_line_break(self, tmp_path: Path) -> None:
        """Follow every anchor with a line break."""
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b.txt").write_text("b")

        html = render_listing(tmp_path, "/pages/notes")

        assert html.count("</a><br>\n") == 2
        assert '<a href="/pages/notes/a.txt">a.txt</a>' in html

    def test__undecodable_name__renders_link(self, tmp_path: Path) -> None:
        """List a file whose name is not valid UTF-8 with a working link."""
        make_undecodable_file(tmp_path)

        html = render_listing(tmp_path, "/pages/")

        assert ANCHOR_RE.findall(html) == [("/pages/bad%FF.txt", "bad\ufffd.txt")]
        assert "\udcff" not in html
