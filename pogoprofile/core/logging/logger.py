"""
pogoprofile Logging Subsystem

Purpose
-------
- Structured JSON (or plain text) log lines for the bootstrap orchestrator.
- `LogContext` binds session and operation fields to every record emitted
  inside it, via a ContextVar so concurrent sessions do not mix.
- Output goes through a QueueHandler + QueueListener pair so emitting from
  the event loop never blocks on the stream.

The package is a library: nothing is configured on import. Hosts opt in
with ``setup_logging()`` and tear down with ``shutdown_logging()``.
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Dict, Optional, TextIO

from pogoprofile.core.config.config import Config

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
QUEUE_MAX_SIZE = 10_000

_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    """Copy the current `LogContext` onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context = _log_context.get({})
        record.session_id = context.get("session_id", "N/A")
        record.operation = context.get("operation", "N/A")
        record.component = context.get("component") or record.name.split(".", 1)[0]
        record.correlation_id = context.get("correlation_id", "N/A")
        return True


class JSONFormatter(logging.Formatter):
    CONTEXT_ATTRS = ("session_id", "operation", "component", "correlation_id")

    # Attributes every LogRecord carries; anything else came from `extra=`
    _RECORD_ATTRS = frozenset(
        logging.LogRecord("", 0, "", 0, "", None, None).__dict__
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in self.CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value not in (None, "N/A"):
                log_data[attr] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            log_data["exception"] = record.exc_text

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._RECORD_ATTRS
            and key not in self.CONTEXT_ATTRS
            and not key.startswith("_")
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, ensure_ascii=False, default=str)


class _DroppingQueueHandler(QueueHandler):
    def enqueue(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            sys.stderr.write("pogoprofile logging queue full; dropping log record.\n")


# ============================================================================
# Setup / Teardown
# ============================================================================

_queue_handler: Optional[QueueHandler] = None
_queue_listener: Optional[QueueListener] = None
_previous_root_level: Optional[int] = None


def setup_logging(
    stream: Optional[TextIO] = None,
    *,
    json_output: Optional[bool] = None,
    level: Optional[str] = None,
) -> None:
    """
    Attach pogoprofile's handler to the root logger. Idempotent.

    Parameters default to ``Config.LOG_JSON`` and ``Config.LOG_LEVEL``;
    output goes to stdout unless `stream` is given.
    """
    global _queue_handler, _queue_listener, _previous_root_level

    if _queue_handler is not None:
        return

    use_json = Config.LOG_JSON if json_output is None else json_output
    log_level = getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO)

    output = logging.StreamHandler(stream or sys.stdout)
    output.setLevel(log_level)
    if use_json:
        output.setFormatter(JSONFormatter())
    else:
        output.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))

    log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(QUEUE_MAX_SIZE)
    _queue_listener = QueueListener(log_queue, output, respect_handler_level=True)
    _queue_listener.start()

    _queue_handler = _DroppingQueueHandler(log_queue)
    _queue_handler.setLevel(log_level)
    # Context must be captured on the emitting task, not the listener thread
    _queue_handler.addFilter(ContextFilter())

    root = logging.getLogger()
    _previous_root_level = root.level
    root.setLevel(log_level)
    root.addHandler(_queue_handler)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={"log_level": logging.getLevelName(log_level), "json": use_json},
    )


def shutdown_logging() -> None:
    """Flush queued records and detach the handler added by `setup_logging`."""
    global _queue_handler, _queue_listener, _previous_root_level

    if _queue_handler is None:
        return

    root = logging.getLogger()
    root.removeHandler(_queue_handler)
    if _previous_root_level is not None:
        root.setLevel(_previous_root_level)

    if _queue_listener is not None:
        _queue_listener.stop()
        for handler in _queue_listener.handlers:
            handler.flush()

    _queue_handler = None
    _queue_listener = None
    _previous_root_level = None


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Bind session/operation context to every log record emitted inside it.

    Works as both a sync and an async context manager. Nested contexts
    inherit outer keys they do not override.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        outer = _log_context.get({})
        self.context: Dict[str, Any] = {
            **outer,
            "session_id": session_id or outer.get("session_id", "N/A"),
            "component": component or outer.get("component"),
            "operation": operation or outer.get("operation", "N/A"),
            "correlation_id": (
                correlation_id or outer.get("correlation_id") or str(uuid.uuid4())[:8]
            ),
            **extra,
        }
        self._token: Optional[Token[Dict[str, Any]]] = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _log_context.reset(self._token)

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get({}))
