"""Command-line interface for twitter-bookmarks."""
