"""
Extract subcommand: scrape bookmarks and write them to a file.
"""

import argparse
import asyncio
import sys

from ..cdp import CDPClient, PageDriver
from ..exceptions import BookmarksError
from ..output import OUTPUT_FORMATS, render, write_output
from ..scraper import BookmarksScraper


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        number = -1
    if number < 0:
        raise argparse.ArgumentTypeError(f"invalid value '{value}': use an integer >= 0")
    return number


def output_path(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise argparse.ArgumentTypeError("output path cannot be empty")
    return cleaned


def folder_name(value: str) -> str:
    return value.strip()


async def extract_handler_async(args: argparse.Namespace) -> int:
    """
    Handle 'extract' command (async implementation).

    Connects to the CDP endpoint, runs the scraper, renders and writes the
    result. Nothing is written when any stage fails.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    config = args.config

    try:
        client = CDPClient(
            config.cdp_host,
            config.cdp_port,
            config.cdp_path,
            command_timeout=config.command_timeout,
        )

        async with client:
            scraper = BookmarksScraper(
                PageDriver(client),
                folder=args.folder or None,
                **config.scraper_options(),
            )
            bookmarks = await scraper.scrape()

        content = render(bookmarks, args.format)
        write_output(content, args.output)

    except BookmarksError as e:
        if config.log_level.upper() == "DEBUG":
            raise
        recovery = e.details.get("recovery")
        # The hint gets its own line instead of the details suffix.
        print(f"Error: {e.message if recovery else e}", file=sys.stderr)
        if recovery:
            print(f"Recovery hint: {recovery}", file=sys.stderr)
        return 1

    print(f"Extracted {len(bookmarks)} bookmarks to {args.output}")
    return 0


def extract_handler(args: argparse.Namespace) -> int:
    """Synchronous wrapper for extract_handler_async."""
    return asyncio.run(extract_handler_async(args))


def register_subcommand(
    subparsers: argparse._SubParsersAction, parent: argparse.ArgumentParser
) -> None:
    """
    Register 'extract' subcommand.

    Args:
        subparsers: Subparsers from main parser
        parent: Parent parser with global options
    """
    extract_parser = subparsers.add_parser(
        "extract",
        parents=[parent],
        help="Scrape bookmarks and write them to a file",
        description="Scroll the bookmarks timeline, extract posts and write JSON or Markdown",
        epilog="""
Examples:
  twitter-bookmarks extract --output bookmarks.md
  twitter-bookmarks extract -o bookmarks.json --format json --max-scrolls 20
  twitter-bookmarks extract -o ai.md --folder AI
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    extract_parser.add_argument(
        "--output",
        "-o",
        type=output_path,
        required=True,
        help="Output file path (required)",
    )
    extract_parser.add_argument(
        "--format",
        "-f",
        choices=OUTPUT_FORMATS,
        default="markdown",
        help="Output format (default: markdown)",
    )
    extract_parser.add_argument(
        "--max-scrolls",
        "-s",
        type=non_negative_int,
        default=None,
        help="Number of scrolls to load more bookmarks (default: 10)",
    )
    extract_parser.add_argument(
        "--folder",
        "-F",
        type=folder_name,
        default=None,
        help="Only keep bookmarks in this folder (case-insensitive)",
    )

    extract_parser.set_defaults(func=extract_handler)
