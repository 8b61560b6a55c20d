"""
Main CLI entry point for twitter-bookmarks.

Usage:
    python -m twitter_bookmarks.cli.main <subcommand> [options]

Subcommands:
    extract     - Scrape bookmarks and write JSON or a Markdown digest
"""

import argparse
import sys
from typing import List, Optional

from twitter_bookmarks.config import Configuration, DEFAULT_CONFIG_FILE
from twitter_bookmarks.logging_setup import setup_logging


def port_number(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        port = 0
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(
            f"invalid port '{value}': use a valid port number (1-65535)"
        )
    return port


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        number = 0.0
    if number <= 0:
        raise argparse.ArgumentTypeError(f"invalid value '{value}': use a number > 0")
    return number


def create_parent_parser() -> argparse.ArgumentParser:
    """
    Create parent parser with global options shared across all subcommands.

    Config-backed options default to None so that env vars and the config
    file still apply when the flag is not given.
    """
    defaults = Configuration.DEFAULTS
    parent = argparse.ArgumentParser(add_help=False)

    # Connection options
    parent.add_argument(
        "--cdp-host",
        default=None,
        help=f"CDP endpoint host (default: {defaults['cdp_host']})",
    )
    parent.add_argument(
        "--cdp-port",
        "-p",
        type=port_number,
        default=None,
        help=f"Chrome DevTools port (default: {defaults['cdp_port']})",
    )
    parent.add_argument(
        "--timeout",
        type=positive_float,
        default=None,
        help=f"CDP command timeout in seconds (default: {defaults['command_timeout']})",
    )

    # Logging options
    parent.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (default: info)",
    )
    parent.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Log output format on stderr (default: text)",
    )

    verbosity_group = parent.add_mutually_exclusive_group()
    verbosity_group.add_argument(
        "--quiet",
        action="store_true",
        help="Only show errors",
    )
    verbosity_group.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose debug output",
    )

    return parent


def create_main_parser(parent: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Create main parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="twitter-bookmarks",
        description="Export X/Twitter bookmarks through the Chrome DevTools Protocol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Markdown digest with default settings
  twitter-bookmarks extract --output bookmarks.md

  # JSON, more scrolling, custom port, single folder
  twitter-bookmarks extract -o out/bookmarks.json -f json -s 25 -p 9222 -F "AI"

For more information on subcommands, run: twitter-bookmarks <subcommand> --help
        """,
    )

    subparsers = parser.add_subparsers(
        dest="subcommand",
        title="subcommands",
        description="Available operations",
        required=True,
    )

    from . import extract_cmd

    extract_cmd.register_subcommand(subparsers, parent)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for CLI.

    Precedence: CLI flags > env vars > config file > defaults

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parent = create_parent_parser()
    parser = create_main_parser(parent)

    args = parser.parse_args(argv)

    config = Configuration()
    config.load_from_file(DEFAULT_CONFIG_FILE)
    config.load_from_env()
    config.merge(
        cdp_host=getattr(args, "cdp_host", None),
        cdp_port=getattr(args, "cdp_port", None),
        command_timeout=getattr(args, "timeout", None),
        max_scrolls=getattr(args, "max_scrolls", None),
        log_level=getattr(args, "log_level", None),
        log_format=getattr(args, "log_format", None),
    )

    if getattr(args, "quiet", False):
        config.log_level = "ERROR"
    elif getattr(args, "verbose", False):
        config.log_level = "DEBUG"

    setup_logging(
        format_type=config.log_format,
        level=config.log_level.upper(),
        quiet=getattr(args, "quiet", False),
        verbose=getattr(args, "verbose", False),
    )

    # Subcommands read settings from here
    args.config = config

    # The subparser is required, so every parsed namespace has a handler.
    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        if config.log_level.upper() == "DEBUG":
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
