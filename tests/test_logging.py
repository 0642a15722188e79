"""Tests for logging utilities."""

import json
import logging

from datasift.utils.logging_config import JsonFormatter, setup_logging
from datasift.utils.pipeline_logger import PipelineLogger, timed_operation


class TestJsonFormatter:
    """Tests for JSON log lines."""

    def test_includes_extras(self):
        """Test fields passed through extra= are emitted."""
        record = logging.LogRecord("datasift", logging.INFO, __file__, 1, "decoded", (), None)
        record.batch_id = "abc"

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "decoded"
        assert payload["level"] == "INFO"
        assert payload["batch_id"] == "abc"
        assert "msg" not in payload

    def test_setup_logging_sets_level(self):
        """Test the root logger level is applied."""
        setup_logging(level="warning", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)


class TestPipelineLogger:
    """Tests for batch-level structured logging."""

    def test_decode_metrics(self):
        """Test counters for decoded and failed files."""
        pipeline_logger = PipelineLogger(source="upload.zip", batch_id="b1")

        pipeline_logger.log_decode("a.csv", row_count=3, duration_ms=10.0)
        pipeline_logger.log_decode("b.csv", row_count=1, duration_ms=30.0)
        pipeline_logger.log_decode("c.xlsx", row_count=0, duration_ms=1.0, error=ValueError("bad"))

        metrics = pipeline_logger.get_metrics()
        assert metrics["decoded_files"] == 2
        assert metrics["failed_files"] == 1
        assert metrics["total_decode_time_ms"] == 40.0
        assert metrics["avg_decode_time_ms"] == 20.0

    def test_structured_fields(self, caplog):
        """Test context fields are attached to the record."""
        pipeline_logger = PipelineLogger(source="upload.zip", batch_id="b1")

        with caplog.at_level(logging.INFO, logger="datasift.pipeline"):
            pipeline_logger.log_transform(
                input_count=5, output_count=4, missing_count=1, dedup_count=1, duration_ms=2.0
            )

        [record] = caplog.records
        assert record.step == "transform"
        assert record.batch_id == "b1"
        assert record.details["dedup_count"] == 1


class TestTimedOperation:
    """Tests for the timing context manager."""

    def test_records_duration(self):
        """Test duration is set on exit."""
        with timed_operation("noop") as timer:
            pass

        assert timer.finished_at is not None
        assert timer.duration_ms >= 0
