"""Bookmark record and decoding of raw extraction entries."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, TypedDict

from typing_extensions import NotRequired


class BookmarkEntry(TypedDict):
    """Shape of one entry returned by the extraction script.

    Values arrive from an uncontrolled page, so every field is checked again
    in Bookmark.from_payload.
    """
    id: str
    authorName: str
    authorHandle: str
    text: str
    url: str
    timestamp: str
    likes: NotRequired[int]
    retweets: NotRequired[int]
    replies: NotRequired[int]
    bookmarks: NotRequired[int]
    hasMedia: NotRequired[bool]
    folder: NotRequired[Optional[str]]


def string_value(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return None


def int_value(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # JSON from the page may carry NaN or Infinity.
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(value.strip().replace(",", ""))
        except ValueError:
            return None
    return None


def bool_value(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "y", "t", "1")
    return None


REQUIRED_FIELDS = ("id", "authorName", "authorHandle", "text", "url", "timestamp")


@dataclass(frozen=True)
class Bookmark:
    """One bookmarked post.

    Identity is ``id``; ``folder`` is the optional grouping tag used for filtering.
    """

    id: str
    author_name: str
    author_handle: str
    text: str
    url: str
    timestamp: str
    likes: int = 0
    retweets: int = 0
    replies: int = 0
    bookmarks: int = 0
    has_media: bool = False
    folder: Optional[str] = None

    @classmethod
    def from_payload(cls, entry: Dict[str, Any]) -> Optional["Bookmark"]:
        """Decode one raw entry.

        Returns None when a required field is missing or not string-like.
        Counters default to 0 and are clamped at 0.
        """
        required = {}
        for key in REQUIRED_FIELDS:
            value = string_value(entry.get(key))
            if value is None:
                return None
            required[key] = value

        def counter(key: str) -> int:
            return max(0, int_value(entry.get(key)) or 0)

        folder = string_value(entry.get("folder"))
        return cls(
            id=required["id"],
            author_name=required["authorName"],
            author_handle=required["authorHandle"],
            text=required["text"],
            url=required["url"],
            timestamp=required["timestamp"],
            likes=counter("likes"),
            retweets=counter("retweets"),
            replies=counter("replies"),
            bookmarks=counter("bookmarks"),
            has_media=bool_value(entry.get("hasMedia")) or False,
            folder=(folder or "").strip() or None,
        )

    def to_dict(self) -> BookmarkEntry:
        """Convert to the camelCase mapping used for JSON output."""
        data: BookmarkEntry = {
            "id": self.id,
            "authorName": self.author_name,
            "authorHandle": self.author_handle,
            "text": self.text,
            "url": self.url,
            "timestamp": self.timestamp,
            "likes": self.likes,
            "retweets": self.retweets,
            "replies": self.replies,
            "bookmarks": self.bookmarks,
            "hasMedia": self.has_media,
        }
        if self.folder is not None:
            data["folder"] = self.folder
        return data
