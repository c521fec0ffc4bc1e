"""Structured logging configuration for bucketview.

Provides:
- JSON format for non-TTY output (CI, pipes) and plain format for terminals
- NO_COLOR support
- run_id and download_id correlation
- Redaction of account ids, ARNs, access keys, home paths and inline secrets
- Queue-based handler so worker threads never block on the stream
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import queue
import re
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from bucketview.security.redact import redact_text

if TYPE_CHECKING:
    from collections.abc import Generator

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)
_download_id: ContextVar[str | None] = ContextVar("download_id", default=None)

_RESERVED_RECORD_KEYS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    PLAIN = "plain"
    AUTO = "auto"


@dataclass
class LogConfig:
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.AUTO
    no_color: bool = False

    @classmethod
    def from_env(cls) -> LogConfig:
        """Build a config from LOG_LEVEL, LOG_FORMAT and NO_COLOR.

        Unknown level or format values fall back to INFO and AUTO.
        """
        try:
            level = LogLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        except ValueError:
            level = LogLevel.INFO

        try:
            format_mode = LogFormat(os.getenv("LOG_FORMAT", "auto").lower())
        except ValueError:
            format_mode = LogFormat.AUTO

        no_color = os.getenv("NO_COLOR", "").lower() in ("1", "true", "yes")

        return cls(level=level, format=format_mode, no_color=no_color)

    def should_use_json(self) -> bool:
        if self.format == LogFormat.JSON:
            return True
        if self.format == LogFormat.PLAIN:
            return False
        return not sys.stdout.isatty()


class SecretRedactor:
    """Redacts credentials and identifying data from log messages.

    Cloud identifiers (account ids, ARNs, access keys, home paths) go through
    the same rules as user-facing error text; inline ``key=value`` secrets are
    handled by the patterns below.
    """

    PATTERNS: ClassVar[tuple[str, ...]] = (
        r'aws_secret_access_key["\s:=]+["\s]*([A-Za-z0-9/+=]{40})',
        r'aws_session_token["\s:=]+["\s]*([A-Za-z0-9/+=]{20,})',
        r'password["\s:=]+["\s]*([^\s"\'}]{6,})',
        r'authorization["\s:=]+["\s]*[Bb]earer\s+([a-zA-Z0-9_-]{20,})',
        r"Bearer\s+([a-zA-Z0-9_-]{20,})",
        r'secret["\s:=]+["\s]*([a-zA-Z0-9_/+=-]{20,})',
        r'token["\s:=]+["\s]*([a-zA-Z0-9_/+=-]{20,})',
    )

    REDACTED_PLACEHOLDER: ClassVar[str] = "***REDACTED***"

    _compiled_patterns: ClassVar[list[re.Pattern[str]]] = [
        re.compile(pattern, re.IGNORECASE) for pattern in PATTERNS
    ]

    @classmethod
    def redact(cls, message: str) -> str:
        message = redact_text(message)
        for pattern in cls._compiled_patterns:
            message = pattern.sub(cls.REDACTED_PLACEHOLDER, message)
        return message


class RedactingFilter(logging.Filter):
    """Logging filter that redacts a record's formatted message and exception text.

    Attach it to handlers that do not use the formatters below (for example a
    third-party file handler) so their output is as safe as ours.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # Redact the formatted text; the path rules would eat %s placeholders
        record.msg = SecretRedactor.redact(record.getMessage())
        record.args = None

        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = SecretRedactor.redact(record.exc_text)

        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": SecretRedactor.redact(record.getMessage()),
            "run_id": getattr(record, "run_id", None),
            "download_id": getattr(record, "download_id", None),
        }

        if record.exc_info:
            log_entry["exception"] = SecretRedactor.redact(self.formatException(record.exc_info))

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS or key in log_entry:
                continue
            log_entry[key] = SecretRedactor.redact(value) if isinstance(value, str) else value

        return json.dumps(log_entry, default=str)


class PlainFormatter(logging.Formatter):
    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, no_color: bool = False) -> None:
        self.no_color = no_color
        fmt = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        message = SecretRedactor.redact(super().format(record))

        context_parts = []
        run_id = getattr(record, "run_id", None)
        download_id = getattr(record, "download_id", None)
        if run_id:
            context_parts.append(f"run_id={run_id}")
        if download_id:
            context_parts.append(f"dl_id={download_id}")
        if context_parts:
            message = f"[{' '.join(context_parts)}] {message}"

        if not self.no_color and sys.stdout.isatty():
            color = self.COLORS.get(record.levelname, "")
            if color:
                message = f"{color}{message}{self.RESET}"

        return message


class AsyncSafeLogHandler(logging.Handler):
    """Queue-backed handler.

    Records are stamped with the current run/download ids on the calling
    thread, then written by a QueueListener thread.
    """

    def __init__(self, handler: logging.Handler) -> None:
        super().__init__()
        self.queue_handler = logging.handlers.QueueHandler(queue.Queue(-1))
        self.queue = self.queue_handler.queue
        self.target_handler = handler
        self.listener: logging.handlers.QueueListener | None = None

    def emit(self, record: logging.LogRecord) -> None:
        record.run_id = _run_id.get()
        record.download_id = _download_id.get()
        self.queue_handler.emit(record)

    def start_listener(self) -> None:
        if self.listener is None:
            self.listener = logging.handlers.QueueListener(self.queue, self.target_handler)
            self.listener.start()

    def stop_listener(self) -> None:
        if self.listener:
            self.listener.stop()
            self.listener = None


_logger: logging.Logger | None = None
_async_handler: AsyncSafeLogHandler | None = None


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the ``bucketview`` logger. Calling it again is a no-op.

    Args:
        config: Logging configuration; read from the environment when omitted.
    """
    global _logger, _async_handler

    if _logger is not None:
        return

    if config is None:
        config = LogConfig.from_env()

    _logger = logging.getLogger("bucketview")
    _logger.setLevel(getattr(logging, config.level.value))
    _logger.handlers.clear()

    use_json = config.should_use_json()
    formatter: logging.Formatter
    if use_json:
        formatter = JSONFormatter()
    else:
        formatter = PlainFormatter(no_color=config.no_color)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    _async_handler = AsyncSafeLogHandler(stream_handler)
    _async_handler.start_listener()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.value))
    root_logger.addHandler(_async_handler)

    # Third-party SDK loggers can echo request details at DEBUG
    for name in ("boto3", "botocore", "s3transfer", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    _logger.info("Logging initialized", extra={"format": "json" if use_json else "plain"})


def shutdown_logging() -> None:
    """Flush queued records and stop the listener thread."""
    global _logger, _async_handler

    if _async_handler:
        _async_handler.stop_listener()
        logging.getLogger().removeHandler(_async_handler)
        _async_handler = None
    _logger = None


@contextmanager
def set_run_id(run_id: str | None = None) -> Generator[None, None, None]:
    """Tag records logged inside the block with a run id (random if omitted)."""
    if run_id is None:
        run_id = str(uuid.uuid4())[:8]
    token = _run_id.set(run_id)
    try:
        yield
    finally:
        _run_id.reset(token)


@contextmanager
def set_download_id(download_id: str | None = None) -> Generator[None, None, None]:
    """Tag records logged inside the block with a download id (random if omitted)."""
    if download_id is None:
        download_id = str(uuid.uuid4())[:8]
    token = _download_id.set(download_id)
    try:
        yield
    finally:
        _download_id.reset(token)


def get_run_id() -> str | None:
    return _run_id.get()


def get_download_id() -> str | None:
    return _download_id.get()


def get_logger(name: str) -> logging.Logger:
    """Return a logger, configuring logging on first use."""
    if _logger is None:
        setup_logging()
    return logging.getLogger(name)


__all__ = [
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    "set_run_id",
    "set_download_id",
    "get_run_id",
    "get_download_id",
    "LogConfig",
    "LogLevel",
    "LogFormat",
    "SecretRedactor",
    "RedactingFilter",
    "JSONFormatter",
    "PlainFormatter",
]
