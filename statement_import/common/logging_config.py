import logging
import json
import os
import datetime
from contextlib import contextmanager
from typing import Any, Optional
from threading import local

GLOBAL_DOCUMENT = "GLOBAL"

# Source id of the document each worker thread is extracting
_context = local()

# Third-party loggers that flood DEBUG output while reading PDFs
_NOISY_LOGGERS = ("pdfminer", "pdfplumber")

# Keyword arguments that belong to Logger.log itself
_LOG_KWARGS = frozenset({'exc_info', 'stack_info', 'stacklevel', 'extra'})


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record, stamped with the current document id.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "document_id": get_document_id(),
            "thread": record.threadName,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_data.update(extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(log_level: int = logging.INFO, log_file: Optional[str] = None):
    """
    Route every record through JSONFormatter to stderr and, optionally, a file.
    Meant for scripts; the library itself never configures logging.
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(JSONFormatter())
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logging.info("Logging infrastructure initialized.", extra={"extra_fields": {"status": "ready"}})


def set_document_id(document_id: Optional[str]):
    """Set the source id of the document being extracted on this thread."""
    _context.document_id = document_id or GLOBAL_DOCUMENT


def get_document_id() -> str:
    return getattr(_context, "document_id", GLOBAL_DOCUMENT)


@contextmanager
def document_scope(document_id: str):
    """Tag the records logged inside the block with document_id."""
    previous = get_document_id()
    set_document_id(document_id)
    try:
        yield
    finally:
        set_document_id(previous)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """
    Turns keyword arguments into structured `extra_fields`:

        logger.warning("Block failed", start_line=12, reason="NoMatch")
    """
    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        log_kwargs = {k: v for k, v in kwargs.items() if k in _LOG_KWARGS}
        fields = {k: v for k, v in kwargs.items() if k not in _LOG_KWARGS}

        extra = dict(log_kwargs.get("extra") or {})
        extra["extra_fields"] = {**(extra.get("extra_fields") or {}), **fields}
        log_kwargs["extra"] = extra
        return msg, log_kwargs


def get_logger(name: str) -> StructuredLoggerAdapter:
    return StructuredLoggerAdapter(logging.getLogger(name), {})
