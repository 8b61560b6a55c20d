"""Export X/Twitter bookmarks through the Chrome DevTools Protocol.

This package provides:
- CDPClient: WebSocket command/response client for a CDP endpoint
- PageDriver: enable/navigate/evaluate effects on the page
- BookmarksScraper: readiness, scroll, extract, filter and dedupe pipeline
- CLI: `twitter-bookmarks extract` rendering JSON or a Markdown digest
"""

__version__ = "0.1.0"
