"""Unit tests for log formatting and level selection."""

import json
import logging
import pytest

from twitter_bookmarks.logging_setup import (
    JSONFormatter,
    TextFormatter,
    log_with_context,
    setup_logging,
)


def make_record(level=logging.INFO, message="Extracted bookmarks", extra=None):
    record = logging.LogRecord(
        "twitter_bookmarks.scraper", level, __file__, 12, message, (), None, func="scrape"
    )
    if extra is not None:
        record.extra = extra
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("twitter_bookmarks").setLevel(logging.NOTSET)
    for name in ("websockets", "asyncio"):
        logging.getLogger(name).setLevel(logging.NOTSET)


@pytest.mark.unit
class TestJSONFormatter:

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "twitter_bookmarks.scraper"
        assert data["message"] == "Extracted bookmarks"
        assert data["timestamp"].endswith("Z")
        assert "location" not in data

    def test_extra_fields(self):
        data = json.loads(JSONFormatter().format(make_record(extra={"count": 42})))
        assert data["extra"] == {"count": 42}

    def test_debug_includes_location(self):
        data = json.loads(JSONFormatter().format(make_record(level=logging.DEBUG)))
        assert data["location"]["line"] == 12
        assert data["location"]["function"] == "scrape"


@pytest.mark.unit
class TestTextFormatter:

    def test_plain_message(self):
        text = TextFormatter().format(make_record())
        assert "[INFO] twitter_bookmarks.scraper: Extracted bookmarks" in text

    def test_extra_fields_appended(self):
        text = TextFormatter().format(make_record(extra={"count": 42, "folder": "AI"}))
        assert text.endswith("Extracted bookmarks [count=42 folder=AI]")


@pytest.mark.unit
class TestSetupLogging:

    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            ({}, logging.INFO),
            ({"level": "warning"}, logging.WARNING),
            ({"level": "DEBUG", "quiet": True}, logging.ERROR),
            ({"level": "ERROR", "verbose": True}, logging.DEBUG),
            ({"level": "bogus"}, logging.INFO),
        ],
    )
    def test_level_selection(self, restore_root_logger, kwargs, expected):
        setup_logging(**kwargs)
        assert restore_root_logger.level == expected
        assert logging.getLogger("twitter_bookmarks").level == expected

    def test_single_handler_with_chosen_formatter(self, restore_root_logger):
        setup_logging(format_type="text")
        setup_logging(format_type="json")

        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_websockets_frame_logging_capped(self, restore_root_logger):
        setup_logging(verbose=True)
        assert logging.getLogger("websockets").level == logging.INFO


@pytest.mark.unit
class TestLogWithContext:

    def test_attaches_extra(self, caplog):
        logger = logging.getLogger("twitter_bookmarks.test")
        with caplog.at_level(logging.INFO, logger="twitter_bookmarks.test"):
            log_with_context(logger, logging.INFO, "Scrolled", step=3)

        assert caplog.records[-1].extra == {"step": 3}
        assert caplog.records[-1].getMessage() == "Scrolled"

    def test_disabled_level_is_skipped(self, caplog):
        logger = logging.getLogger("twitter_bookmarks.test")
        with caplog.at_level(logging.WARNING, logger="twitter_bookmarks.test"):
            log_with_context(logger, logging.INFO, "Scrolled", step=3)

        assert caplog.records == []

    def test_record_points_at_caller(self, caplog):
        logger = logging.getLogger("twitter_bookmarks.test")
        with caplog.at_level(logging.DEBUG, logger="twitter_bookmarks.test"):
            log_with_context(logger, logging.DEBUG, "Scrolled", step=3)
            log_with_context(logger, logging.DEBUG, "Scrolled again")

        for record in caplog.records[-2:]:
            assert record.funcName == "test_record_points_at_caller"
            assert record.filename == "test_logging_setup.py"
            assert record.lineno > 0

        location = json.loads(JSONFormatter().format(caplog.records[-2]))["location"]
        assert location["function"] == "test_record_points_at_caller"
