"""Configuration management for twitter-bookmarks.

Supports multiple configuration sources with precedence:
CLI flags > Environment variables > Config file > Defaults

Usage:
    >>> config = Configuration()
    >>> config.load_from_file("~/.twitter-bookmarksrc")
    >>> config.load_from_env()
    >>> config.merge(cdp_port=9222)  # CLI overrides
    >>> print(config.cdp_port)
    9222
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.twitter-bookmarksrc"
ENV_PREFIX = "TWITTER_BOOKMARKS_"


class Configuration:
    """Configuration manager with layered precedence.

    Precedence order (highest to lowest):
    1. CLI arguments (via merge method)
    2. Environment variables (TWITTER_BOOKMARKS_* prefix)
    3. Config file (~/.twitter-bookmarksrc JSON)
    4. Default values

    Attributes:
        cdp_host: CDP endpoint host (default: 127.0.0.1)
        cdp_port: CDP endpoint port (default: 18792)
        cdp_path: CDP WebSocket path (default: /cdp)
        command_timeout: Default CDP command timeout in seconds (default: 15.0)
        max_scrolls: Scroll iterations (default: 10)
        page_load_timeout: Seconds to wait for the timeline (default: 30.0)
        poll_interval: Seconds between readiness checks (default: 0.5)
        scroll_delay: Seconds to wait after each scroll (default: 1.0)
        retry_count: Stage re-attempts (default: 2)
        log_level: Logging level (default: "INFO")
        log_format: Log output format "text" or "json" (default: "text")
    """

    DEFAULTS: Dict[str, Any] = {
        "cdp_host": "127.0.0.1",
        "cdp_port": 18792,
        "cdp_path": "/cdp",
        "command_timeout": 15.0,
        "max_scrolls": 10,
        "page_load_timeout": 30.0,
        "poll_interval": 0.5,
        "scroll_delay": 1.0,
        "retry_count": 2,
        "log_level": "INFO",
        "log_format": "text",
    }

    TYPES = {
        "cdp_host": str,
        "cdp_port": int,
        "cdp_path": str,
        "command_timeout": float,
        "max_scrolls": int,
        "page_load_timeout": float,
        "poll_interval": float,
        "scroll_delay": float,
        "retry_count": int,
        "log_level": str,
        "log_format": str,
    }

    def __init__(self):
        """Initialize configuration with default values."""
        for key, value in self.DEFAULTS.items():
            setattr(self, key, value)

    def load_from_file(self, file_path: str = DEFAULT_CONFIG_FILE) -> None:
        """Load configuration from JSON file.

        Note:
            Invalid JSON or missing file is ignored with a log message.
            Partial configs are merged with existing values.
        """
        path = Path(file_path).expanduser()

        if not path.exists():
            logger.debug(f"Config file not found: {path}")
            return

        try:
            with open(path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in config file {path}: {e}")
            return
        except OSError as e:
            logger.warning(f"Error loading config file {path}: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Config file {path} must contain a JSON object")
            return

        self._merge_dict(data)
        logger.info(f"Loaded configuration from {path}")

    def load_from_env(self) -> None:
        """Load configuration from TWITTER_BOOKMARKS_* environment variables.

        e.g. TWITTER_BOOKMARKS_CDP_PORT=9222. Invalid values are ignored
        with a warning log.
        """
        for attr_name in self.DEFAULTS:
            env_var = ENV_PREFIX + attr_name.upper()
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                converted_value = self.TYPES[attr_name](value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid value for {env_var}: {value} ({e})")
                continue
            setattr(self, attr_name, converted_value)
            logger.debug(f"Loaded {attr_name}={converted_value} from {env_var}")

    def merge(self, **kwargs) -> None:
        """Merge CLI arguments into configuration (highest precedence).

        None values are skipped so unset flags do not mask lower layers.

        Example:
            >>> config.merge(cdp_port=9222, max_scrolls=None)
        """
        self._merge_dict(kwargs)

    def _merge_dict(self, data: dict) -> None:
        for key, value in data.items():
            if key not in self.DEFAULTS or value is None:
                continue
            try:
                value = self.TYPES[key](value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid value for {key}: {value!r} ({e})")
                continue
            setattr(self, key, value)
            logger.debug(f"Set {key}={value}")

    def scraper_options(self) -> Dict[str, Any]:
        """Keyword arguments for BookmarksScraper."""
        return {
            "max_scrolls": self.max_scrolls,
            "page_load_timeout": self.page_load_timeout,
            "poll_interval": self.poll_interval,
            "scroll_delay": self.scroll_delay,
            "retry_count": self.retry_count,
        }

    def to_dict(self) -> dict:
        """Export configuration as dictionary."""
        return {key: getattr(self, key) for key in self.DEFAULTS}

    def __repr__(self) -> str:
        return f"Configuration({self.to_dict()})"
