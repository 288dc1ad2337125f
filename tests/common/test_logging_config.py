"""
Unit Tests for structured logging
"""
import json
import logging

from statement_import.common.logging_config import (
    JSONFormatter, StructuredLoggerAdapter, document_scope, get_document_id, get_logger, set_document_id,
    setup_logging,
)


def make_record(msg="Block failed", **extra_fields):
    record = logging.LogRecord("statement_import.test", logging.WARNING, __file__, 10, msg, None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


class TestJSONFormatter:

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "WARNING"
        assert data["message"] == "Block failed"
        assert data["logger"] == "statement_import.test"

    def test_extra_fields_merged(self):
        data = json.loads(JSONFormatter().format(make_record(reason="NoMatch", start_line=7)))
        assert data["reason"] == "NoMatch"
        assert data["start_line"] == 7

    def test_document_id_stamped(self):
        set_document_id("q.pdf")
        try:
            data = json.loads(JSONFormatter().format(make_record()))
            assert data["document_id"] == "q.pdf"
        finally:
            set_document_id(None)
        assert get_document_id() == "GLOBAL"

    def test_document_scope_restores_previous(self):
        with document_scope("a.pdf"):
            with document_scope("b.pdf"):
                assert get_document_id() == "b.pdf"
            assert json.loads(JSONFormatter().format(make_record()))["document_id"] == "a.pdf"
        assert get_document_id() == "GLOBAL"


class TestStructuredLoggerAdapter:

    def test_kwargs_become_extra_fields(self):
        adapter = get_logger("statement_import.test")
        assert isinstance(adapter, StructuredLoggerAdapter)

        msg, kwargs = adapter.process("Block failed", {"reason": "NoMatch", "exc_info": False})

        assert msg == "Block failed"
        assert kwargs["exc_info"] is False
        assert kwargs["extra"]["extra_fields"] == {"reason": "NoMatch"}

    def test_records_reach_handlers(self, caplog):
        logger = get_logger("statement_import.test")
        with caplog.at_level(logging.INFO, logger="statement_import.test"):
            logger.info("Extraction finished", item_count=5)

        record = caplog.records[-1]
        assert record.getMessage() == "Extraction finished"
        assert record.extra_fields == {"item_count": 5}


class TestSetupLogging:

    def test_writes_json_file(self, tmp_path):
        log_file = tmp_path / "logs" / "extract.log"
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging(logging.DEBUG, str(log_file))
            get_logger("statement_import.test").debug("Loaded layout", layout_file="questrade.json")
            for handler in root.handlers:
                handler.flush()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert lines[0]["status"] == "ready"
        assert lines[-1]["layout_file"] == "questrade.json"
