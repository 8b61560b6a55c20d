"""Bookmarks scraping pipeline.

Sequences the page through:
enable domains → navigate → wait for timeline → expand/scroll loop →
extract → folder filter → dedupe.
"""

import asyncio
import logging
from typing import Any, Iterable, List, Optional

from .cdp.page import PageDriver
from .exceptions import CDPError, InvalidBookmarkPayloadError, PageLoadTimeoutError
from .logging_setup import log_with_context
from .models import Bookmark, bool_value, int_value
from .retry import with_retry
from .scripts import (
    BOOKMARKS_URL,
    EXPAND_SCRIPT,
    EXTRACT_SCRIPT,
    READY_CHECK_SCRIPT,
    SCROLL_SCRIPT,
)

logger = logging.getLogger(__name__)

READY_CHECK_TIMEOUT = 5.0
EXPAND_TIMEOUT = 10.0
SCROLL_TIMEOUT = 10.0
EXTRACT_TIMEOUT = 30.0


def parse_bookmarks(value: Any) -> List[Bookmark]:
    """Decode the extraction script's return value.

    Entries that are not mappings or lack a required field are dropped.

    Raises:
        InvalidBookmarkPayloadError: If value is not a list
    """
    if not isinstance(value, list):
        raise InvalidBookmarkPayloadError(details={"type": type(value).__name__})

    bookmarks = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        bookmark = Bookmark.from_payload(entry)
        if bookmark is not None:
            bookmarks.append(bookmark)

    dropped = len(value) - len(bookmarks)
    if dropped:
        logger.debug(f"Dropped {dropped} malformed bookmark entr{'y' if dropped == 1 else 'ies'}")
    return bookmarks


def filter_by_folder(bookmarks: Iterable[Bookmark], folder: Optional[str]) -> List[Bookmark]:
    """Keep bookmarks whose folder matches case-insensitively.

    A blank or missing filter keeps everything. With an active filter,
    bookmarks without a folder never match.
    """
    wanted = (folder or "").strip()
    if not wanted:
        return list(bookmarks)

    wanted = wanted.casefold()
    return [b for b in bookmarks if b.folder and b.folder.casefold() == wanted]


def deduplicate(bookmarks: Iterable[Bookmark]) -> List[Bookmark]:
    """Keep the first bookmark for each id, preserving order."""
    seen = set()
    unique = []
    for bookmark in bookmarks:
        if bookmark.id in seen:
            continue
        seen.add(bookmark.id)
        unique.append(bookmark)
    return unique


class BookmarksScraper:
    """Collects bookmarks from the live bookmarks timeline.

    Usage:
        async with CDPClient(port=18792) as client:
            scraper = BookmarksScraper(PageDriver(client), max_scrolls=5)
            bookmarks = await scraper.scrape()

    Attributes:
        page: PageDriver bound to a connected client
        max_scrolls: Scroll iterations to load more bookmarks
        page_load_timeout: Seconds to wait for the timeline to become ready
        poll_interval: Seconds between readiness checks
        scroll_delay: Seconds to wait after each scroll
        retry_count: Re-attempts for enable, navigate and extract stages
        retry_delay: Seconds between re-attempts
        folder: Optional folder name filter
        target_url: Page to scrape
    """

    def __init__(
        self,
        page: PageDriver,
        *,
        max_scrolls: int = 10,
        page_load_timeout: float = 30.0,
        poll_interval: float = 0.5,
        scroll_delay: float = 1.0,
        retry_count: int = 2,
        retry_delay: float = 0.5,
        folder: Optional[str] = None,
        target_url: str = BOOKMARKS_URL,
    ):
        if max_scrolls < 0:
            raise ValueError(f"max_scrolls must be >= 0, got {max_scrolls}")

        self.page = page
        self.max_scrolls = max_scrolls
        self.page_load_timeout = page_load_timeout
        self.poll_interval = poll_interval
        self.scroll_delay = scroll_delay
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.folder = folder
        self.target_url = target_url

    async def scrape(self) -> List[Bookmark]:
        """Run the full pipeline and return filtered, deduplicated bookmarks."""
        await self._retry("enable CDP domains", self.page.enable_domains)
        await self._retry("navigate to bookmarks", lambda: self.page.navigate(self.target_url))

        await self.wait_for_timeline()

        # Expand collapsed posts first so extraction sees full text.
        await self.expand_show_more()
        for iteration in range(self.max_scrolls):
            await self.expand_show_more()
            await self.scroll()
            logger.debug(f"Scroll {iteration + 1}/{self.max_scrolls}")
            await asyncio.sleep(self.scroll_delay)
        await self.expand_show_more()

        parsed = await self._retry("extract bookmark data", self.extract)
        filtered = filter_by_folder(parsed, self.folder)
        bookmarks = deduplicate(filtered)

        log_with_context(
            logger,
            logging.INFO,
            f"Collected {len(bookmarks)} bookmarks",
            extracted=len(parsed),
            after_filter=len(filtered),
            unique=len(bookmarks),
            folder=self.folder,
        )
        return bookmarks

    async def wait_for_timeline(self) -> None:
        """Poll the readiness check until true or page_load_timeout elapses.

        A failing check counts as "not ready yet".

        Raises:
            PageLoadTimeoutError: If the timeline never becomes ready
        """
        loop = asyncio.get_running_loop()
        start = loop.time()
        checks = 0

        while True:
            remaining = self.page_load_timeout - (loop.time() - start)
            if remaining <= 0:
                break

            checks += 1
            try:
                ready = await self.page.evaluate(
                    READY_CHECK_SCRIPT, timeout=min(READY_CHECK_TIMEOUT, remaining)
                )
            except CDPError as e:
                logger.debug(f"Readiness check {checks} failed: {e}")
                ready = None

            if bool_value(ready) is True:
                log_with_context(
                    logger, logging.INFO, "Bookmarks timeline ready",
                    checks=checks, elapsed=round(loop.time() - start, 2),
                )
                return

            await asyncio.sleep(self.poll_interval)

        raise PageLoadTimeoutError(
            f"Bookmarks timeline did not load within {self.page_load_timeout:g} seconds",
            timeout=self.page_load_timeout,
            details={"checks": checks},
        )

    async def expand_show_more(self) -> int:
        """Click visible "Show more" controls; returns the click count."""
        clicks = int_value(await self.page.evaluate(EXPAND_SCRIPT, timeout=EXPAND_TIMEOUT)) or 0
        if clicks:
            logger.debug(f"Expanded {clicks} collapsed post(s)")
        return clicks

    async def scroll(self) -> None:
        await self.page.evaluate(SCROLL_SCRIPT, timeout=SCROLL_TIMEOUT)

    async def extract(self) -> List[Bookmark]:
        value = await self.page.evaluate(EXTRACT_SCRIPT, timeout=EXTRACT_TIMEOUT)
        return parse_bookmarks(value)

    async def _retry(self, name: str, operation):
        log_with_context(logger, logging.INFO, f"Stage: {name}", retry_count=self.retry_count)
        return await with_retry(name, operation, self.retry_count, self.retry_delay)
