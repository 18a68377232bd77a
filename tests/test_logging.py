"""
Tests for the logging module.

Tests verify:
- JSON output carries ECS field names and service metadata
- DEBUG logs are suppressed at INFO level
- LogContext binds and unbinds the type name
"""

import json

from doc_merge.logging import LogContext, configure_logging, get_logger


def records(capsys):
    return [json.loads(line) for line in capsys.readouterr().err.splitlines() if line]


class TestConfigureLogging:
    """Test configure_logging output."""

    def test_json_fields(self, capsys):
        configure_logging(level="INFO", json_format=True)

        get_logger(__name__).warning("member_unmatched", export="setTag:", type="CCNode")

        [record] = records(capsys)
        assert record["event"] == "member_unmatched"
        assert record["export"] == "setTag:"
        assert record["log.level"] == "warning"
        assert record["service.name"] == "doc-merge"
        assert "@timestamp" in record

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)

        get_logger(__name__).debug("unhandled_markup_kind", kind="table")

        assert records(capsys) == []

    def test_no_timestamp(self, capsys):
        configure_logging(level="DEBUG", json_format=True, add_timestamp=False, service="docs-ci")

        get_logger(__name__).debug("document_written")

        [record] = records(capsys)
        assert "@timestamp" not in record
        assert record["service.name"] == "docs-ci"


class TestLogContext:
    """Test scoped context binding."""

    def test_context_bound_inside_block(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger(__name__)

        with LogContext(type="Widget"):
            logger.info("type_merged")
        logger.info("merge_completed")

        inside, outside = records(capsys)
        assert inside["type"] == "Widget"
        assert "type" not in outside
