"""Rendering and persistence of extracted bookmarks.

Formats:
- json: pretty-printed array with sorted camelCase keys
- markdown: human-readable digest
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from .exceptions import OutputWriteError
from .models import Bookmark

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("json", "markdown")
HEADLINE_LIMIT = 120


def render(
    bookmarks: Sequence[Bookmark],
    format: str,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render bookmarks in the requested format.

    Raises:
        ValueError: If format is not one of OUTPUT_FORMATS
    """
    if format == "json":
        return render_json(bookmarks)
    if format == "markdown":
        return render_markdown(bookmarks, generated_at or datetime.now(timezone.utc))
    raise ValueError(f"Unsupported output format: {format!r} (expected one of {', '.join(OUTPUT_FORMATS)})")


def render_json(bookmarks: Sequence[Bookmark]) -> str:
    return json.dumps(
        [bookmark.to_dict() for bookmark in bookmarks],
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
    )


def render_markdown(bookmarks: Sequence[Bookmark], generated_at: datetime) -> str:
    if generated_at.tzinfo is None:
        generated_at = generated_at.replace(tzinfo=timezone.utc)
    generated_date = generated_at.astimezone(timezone.utc).strftime("%Y-%m-%d")

    lines: List[str] = [
        "# Twitter Bookmarks Digest",
        f"*Generated: {generated_date}*",
        "",
    ]

    for bookmark in bookmarks:
        handle = bookmark.author_handle or "@unknown"
        headline = escape_markdown(truncate_headline(bookmark.text))
        lines.append(f"## {handle} — [{headline}]({bookmark.url})")
        lines.append(
            f"Posted: {render_timestamp(bookmark.timestamp)}"
            f" | 👍 {bookmark.likes} | 🔄 {bookmark.retweets}"
            f" | 💬 {bookmark.replies} | 🔖 {bookmark.bookmarks}"
        )
        if bookmark.has_media:
            lines.append("Media: yes")
        lines.append("---")
        lines.append("")

    return "\n".join(lines)


def truncate_headline(text: str, limit: int = HEADLINE_LIMIT) -> str:
    normalized = text.replace("\n", " ").replace("\r", " ").strip()
    if len(normalized) <= limit:
        return normalized or "Tweet"
    return normalized[:limit] + "..."


def render_timestamp(value: str) -> str:
    """Readable local date for an ISO-8601 timestamp; raw value otherwise."""
    if not value:
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    local = parsed.astimezone()
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year} at {hour}:{local:%M} {local:%p}"


def escape_markdown(value: str) -> str:
    for char in ("\\", "[", "]", "*", "_"):
        value = value.replace(char, "\\" + char)
    return value


def write_output(content: str, path: str) -> Path:
    """Atomically write content to path, creating parent directories.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    target = Path(path).expanduser()
    tmp_name = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputWriteError(path, details={"error": e.strerror or str(e)}) from e

    logger.debug(f"Wrote {len(content)} characters to {target}")
    return target
