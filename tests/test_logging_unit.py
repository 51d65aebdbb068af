"""Unit tests for structured logging."""

import json
import logging

from feedbuilder.cache import MemoryCache
from feedbuilder.config import Config
from feedbuilder.feed import Feed
from feedbuilder.logging_config import (
    StructuredFormatter,
    create_execution_logger,
    setup_structured_logging,
)


class TestStructuredLoggingUnit:
    """Unit tests for StructuredFormatter and ExecutionLogger."""

    def test_formatter_outputs_context_fields(self):
        record = logging.LogRecord(
            "feedbuilder.feed", logging.INFO, __file__, 10, "Rendering", None, None
        )
        record.execution_id = "exec_1"
        record.component = "feed"
        record.feed_format = "rss"
        record.items_count = 3
        record.unrelated = "ignored"

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "feedbuilder.feed"
        assert entry["message"] == "Rendering"
        assert entry["execution_id"] == "exec_1"
        assert entry["feed_format"] == "rss"
        assert entry["items_count"] == 3
        assert "unrelated" not in entry

    def test_execution_logger_generates_id(self):
        logger = create_execution_logger("feed")

        assert logger.execution_id.startswith("exec_")
        assert logger.logger.name == "feedbuilder.feed"

    def test_render_is_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="feedbuilder")
        config = Config()
        config.timezone = "UTC"
        feed = Feed(config=config, cache=MemoryCache(), execution_id="exec_test")
        feed.add("t", "a", "https://example.com/1", "2024-01-01", "d")

        feed.render("rss", 60, "logged")
        feed.render("rss", 60, "logged")

        render_records = [r for r in caplog.records if hasattr(r, "feed_format")]
        assert len(render_records) == 2
        assert render_records[0].items_count == 1
        assert render_records[0].cache_key == "logged"
        assert render_records[0].execution_id == "exec_test"

        cache_hits = [r.cache_hit for r in caplog.records if hasattr(r, "cache_hit")]
        assert cache_hits == [False, True]

    def test_setup_structured_logging(self):
        root_logger = logging.getLogger()
        original_handlers = root_logger.handlers[:]
        original_level = root_logger.level
        try:
            setup_structured_logging("debug")

            assert root_logger.level == logging.DEBUG
            assert len(root_logger.handlers) == 1
            assert isinstance(root_logger.handlers[0].formatter, StructuredFormatter)
            assert logging.getLogger("feedbuilder.cache").level == logging.DEBUG
        finally:
            setup_structured_logging("info")
            root_logger.handlers[:] = original_handlers
            root_logger.setLevel(original_level)
