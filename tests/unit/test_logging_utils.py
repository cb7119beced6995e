"""
Unit tests for structured logging helpers
"""

import json
import logging

from eufy_bridge.logging_utils import (
    HumanReadableFormatter,
    generate_trace_id,
    get_component_logger,
    get_trace_id,
    setup_structured_logging,
    trace_context,
)


class TestTraceContext:
    def test_trace_id_format(self):
        trace_id = generate_trace_id("push")
        assert trace_id.startswith("push-")
        assert len(trace_id) == len("push-") + 8

    def test_context_sets_and_resets(self):
        assert get_trace_id() is None
        with trace_context("push-1234") as trace_id:
            assert trace_id == "push-1234"
            assert get_trace_id() == "push-1234"
        assert get_trace_id() is None

    def test_generated_when_missing(self):
        with trace_context() as trace_id:
            assert trace_id.startswith("trace-")


class TestComponentLogger:
    def test_component_and_trace_added(self, caplog):
        logger = get_component_logger("eufy_bridge.test", "dispatcher")

        with caplog.at_level(logging.INFO, logger="eufy_bridge.test"):
            with trace_context("push-abcd"):
                logger.info("hello", extra={"event": "greeting"})

        record = caplog.records[0]
        assert record.component == "dispatcher"
        assert record.trace_id == "push-abcd"
        assert record.event == "greeting"

    def test_user_extra_overrides_component(self, caplog):
        logger = get_component_logger("eufy_bridge.test", "dispatcher")

        with caplog.at_level(logging.INFO, logger="eufy_bridge.test"):
            logger.info("hello", extra={"component": "custom"})

        assert caplog.records[0].component == "custom"


class TestFormatters:
    def test_human_readable_fills_defaults(self):
        record = logging.LogRecord("eufy_bridge.bridge.publisher", logging.INFO, __file__, 1, "msg", None, None)

        line = HumanReadableFormatter().format(record)

        assert "publisher" in line
        assert "| -" in line
        assert line.endswith("msg")

    def test_json_output(self, capsys):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_structured_logging(level="INFO", json_format=True)
            with trace_context("push-0001"):
                logging.getLogger("eufy_bridge.test").info("published", extra={"event": "x"})
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        data = json.loads(line)
        assert data["message"] == "published"
        assert data["level"] == "INFO"
        assert data["logger"] == "eufy_bridge.test"
        assert data["trace_id"] == "push-0001"
        assert data["event"] == "x"
