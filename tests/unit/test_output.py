"""Unit tests for JSON/Markdown rendering and output file writing."""

import json
import time
import pytest
from datetime import datetime, timezone

from twitter_bookmarks.exceptions import OutputWriteError
from twitter_bookmarks.models import Bookmark
from twitter_bookmarks.output import (
    escape_markdown,
    render,
    render_timestamp,
    truncate_headline,
    write_output,
)

GENERATED_AT = datetime(2024, 5, 14, 8, 0, tzinfo=timezone.utc)


def make_bookmark(**overrides):
    fields = dict(
        id="1",
        author_name="Ada Lovelace",
        author_handle="@ada",
        text="Notes on the analytical engine",
        url="https://x.com/ada/status/1",
        timestamp="",
        likes=10,
        retweets=2,
        replies=1,
        bookmarks=5,
        has_media=False,
        folder=None,
    )
    fields.update(overrides)
    return Bookmark(**fields)


@pytest.mark.unit
class TestRenderJSON:

    def test_empty_list(self):
        assert render([], "json") == "[]"

    def test_sorted_camel_case_keys(self):
        output = render([make_bookmark(folder="AI")], "json")
        data = json.loads(output)

        assert list(data[0].keys()) == sorted(data[0].keys())
        assert data[0]["authorHandle"] == "@ada"
        assert data[0]["hasMedia"] is False
        assert data[0]["folder"] == "AI"
        assert output.startswith("[\n  {")

    def test_non_ascii_kept(self):
        assert "café ☕" in render([make_bookmark(text="café ☕")], "json")


@pytest.mark.unit
class TestRenderMarkdown:

    def test_header_only_for_empty_list(self):
        output = render([], "markdown", generated_at=GENERATED_AT)
        assert output.splitlines()[:2] == ["# Twitter Bookmarks Digest", "*Generated: 2024-05-14*"]
        assert "## " not in output

    def test_entry_layout(self):
        output = render([make_bookmark(has_media=True)], "markdown", generated_at=GENERATED_AT)

        assert "## @ada — [Notes on the analytical engine](https://x.com/ada/status/1)" in output
        assert "Posted: Unknown | 👍 10 | 🔄 2 | 💬 1 | 🔖 5" in output
        assert "Media: yes" in output
        assert output.count("---") == 1

    def test_media_line_omitted(self):
        output = render([make_bookmark()], "markdown", generated_at=GENERATED_AT)
        assert "Media:" not in output

    def test_headline_is_escaped(self):
        output = render([make_bookmark(text="a [link] *bold* _it_")], "markdown", generated_at=GENERATED_AT)
        assert r"[a \[link\] \*bold\* \_it\_]" in output

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported output format"):
            render([], "csv")


@pytest.mark.unit
class TestMarkdownHelpers:

    def test_short_headline_unchanged(self):
        assert truncate_headline("hello\nworld") == "hello world"

    def test_long_headline_truncated(self):
        headline = truncate_headline("x" * 200)
        assert headline == "x" * 120 + "..."

    def test_empty_headline(self):
        assert truncate_headline("  \n ") == "Tweet"

    def test_escape_backslash_first(self):
        assert escape_markdown("a\\[b]") == "a\\\\\\[b\\]"

    def test_timestamp_unknown(self):
        assert render_timestamp("") == "Unknown"

    def test_timestamp_unparseable_kept_raw(self):
        assert render_timestamp("yesterday") == "yesterday"

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_timestamp_formatted(self, monkeypatch):
        monkeypatch.setenv("TZ", "UTC")
        time.tzset()
        try:
            assert render_timestamp("2024-05-13T21:05:00.000Z") == "May 13, 2024 at 9:05 PM"
            assert render_timestamp("2024-05-13T00:30:00Z") == "May 13, 2024 at 12:30 AM"
        finally:
            monkeypatch.undo()
            time.tzset()


@pytest.mark.unit
class TestWriteOutput:

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "bookmarks.md"

        written = write_output("# digest\n", str(target))

        assert written == target
        assert target.read_text(encoding="utf-8") == "# digest\n"
        assert [p.name for p in target.parent.iterdir()] == ["bookmarks.md"]

    def test_overwrites_existing_file(self, tmp_path):
        target = tmp_path / "out.json"
        target.write_text("old")

        write_output("[]", str(target))

        assert target.read_text() == "[]"

    def test_unwritable_path_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(OutputWriteError) as exc_info:
            write_output("[]", str(blocker / "out.json"))

        assert exc_info.value.path == str(blocker / "out.json")
        assert "Unable to write output file at path" in str(exc_info.value)
