"""
Tests for logging setup and the JSON formatter.
"""

import io
import json
import logging
import sys

import pytest

from clearseller.orchestrator.logging_config import JSONFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("clearseller.scoring.product_scorer").setLevel(logging.NOTSET)


class TestJSONFormatter:

    def _record(self, **extra):
        record = logging.LogRecord(
            name="clearseller.scoring.product_scorer",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Analyzed %r",
            args=("Mount",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(self._record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "clearseller.scoring.product_scorer"
        assert entry["msg"] == "Analyzed 'Mount'"
        assert "ts" in entry

    def test_extra_fields(self):
        entry = json.loads(JSONFormatter().format(self._record(score=87, potential="high", unrelated="x")))

        assert entry["score"] == 87
        assert entry["potential"] == "high"
        assert "unrelated" not in entry

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = self._record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]


class TestSetupLogging:

    def test_json_output_to_stream(self):
        stream = io.StringIO()
        setup_logging(level="INFO", json_output=True, stream=stream)

        logging.getLogger("clearseller.test").info("scan done", extra={"count": 3})

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert lines[-1]["msg"] == "scan done"
        assert lines[-1]["count"] == 3

    def test_level_filters(self):
        stream = io.StringIO()
        setup_logging(level="WARNING", stream=stream)

        logging.getLogger("clearseller.test").info("hidden")
        logging.getLogger("clearseller.test").warning("shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "clearseller.log"
        setup_logging(level="INFO", log_file=str(log_file), stream=io.StringIO())

        logging.getLogger("clearseller.test").info("to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "to file" in log_file.read_text(encoding="utf-8")

    def test_text_output_appends_context(self):
        stream = io.StringIO()
        setup_logging(level="INFO", stream=stream)

        logging.getLogger("clearseller.test").info("analyzed", extra={"score": 63, "potential": "medium"})

        line = stream.getvalue().splitlines()[-1]
        assert "analyzed [score=63 potential=medium]" in line

    def test_engine_level(self):
        stream = io.StringIO()
        setup_logging(level="DEBUG", stream=stream, engine_level="WARNING")

        logging.getLogger("clearseller.scoring.product_scorer").debug("per product")
        logging.getLogger("clearseller.scoring.scoring_config").debug("config detail")

        assert "per product" not in stream.getvalue()
        assert "config detail" in stream.getvalue()

        setup_logging(level="DEBUG", stream=stream)
        assert logging.getLogger("clearseller.scoring.product_scorer").level == logging.NOTSET

    def test_replaces_existing_handlers(self):
        setup_logging(stream=io.StringIO())
        setup_logging(stream=io.StringIO())

        assert len(logging.getLogger().handlers) == 1
