"""Logging configuration for SalesNote Engine."""

import contextvars
import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict

# Context variable for storing the request id in request scope
request_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)

_STANDARD_RECORD_FIELDS = frozenset([
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName",
    "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "getMessage", "taskName",
])


class CloudLoggingFormatter(logging.Formatter):
    """JSON formatter for Google Cloud Logging.

    Each record becomes one JSON line. Source location uses the special
    ``logging.googleapis.com/sourceLocation`` key so the Logs Explorer links
    it. Chained exceptions (``raise X from e``) also report their cause,
    which for a failed chunk is the remote error.
    """

    # Map Python logging levels to Cloud Logging severity
    SEVERITY_MAP = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARNING",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "severity": self.SEVERITY_MAP.get(record.levelno, "DEFAULT"),
            "message": record.getMessage(),
            "logger": record.name,
            "logging.googleapis.com/sourceLocation": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        request_id = request_id_context.get()
        if request_id:
            log_entry["request_id"] = request_id

        # Add extra fields from logger.info(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_FIELDS:
                log_entry[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            log_entry.update(self._exception_fields(record.exc_info[1]))

        return json.dumps(log_entry, default=str, ensure_ascii=False)

    @staticmethod
    def _exception_fields(exc: BaseException) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "exception": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        }
        if exc.__cause__ is not None:
            fields["exception_cause"] = f"{type(exc.__cause__).__name__}: {exc.__cause__}"
        return fields


def setup_logging() -> None:
    """Configure structured logging for the application.

    Local development gets a plain text format at DEBUG level. Every other
    environment gets single-line JSON at LOG_LEVEL, suitable for Cloud Run
    log ingestion.
    """
    from salesnote.core.config import settings

    if settings.ENV == "local":
        log_level = logging.DEBUG
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        log_level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO
        formatter = CloudLoggingFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.setLevel(log_level)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.propagate = False

    # The OpenAI SDK logs every request body at DEBUG
    for logger_name in ["openai", "httpx", "httpcore"]:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.INFO))
