"""Logging configuration for sqs2http."""

import json
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, cast


class ContextStore:
    """A task-local store for logging context.

    Backed by a ContextVar so that concurrent tasks on one event loop keep
    their own context.
    """

    def __init__(self) -> None:
        """Initializes the ContextStore."""
        self._context: ContextVar[dict[str, Any]] = ContextVar("sqs2http_log_context")

    def set(self, data: dict[str, Any]) -> Any:
        """Sets the context data.

        Args:
            data: The context data to set.

        Returns:
            A token that restores the previous context when passed to reset().
        """
        return self._context.set(data)

    def get(self) -> dict[str, Any]:
        """Gets the context data.

        Returns:
            The context data.
        """
        return self._context.get({})

    def reset(self, token: Any) -> None:
        """Restores the context that was active before the matching set()."""
        self._context.reset(token)


_context_store = ContextStore()


class ContextFilter(logging.Filter):
    """A logging filter that injects context.

    The ContextStore and the 'extra' kwarg of each log record are merged into
    a single 'context' attribute.
    """

    # These are the standard attributes of a LogRecord
    RESERVED_ATTRS = (
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
        "thread",
        "threadName",
        "taskName",
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """Filters a log record.

        Args:
            record: The log record to filter.

        Returns:
            True if the record should be logged, False otherwise.
        """
        task_context = _context_store.get().copy()

        extra_context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self.RESERVED_ATTRS and key not in ("context",)
        }

        # The per-call 'extra' context takes precedence.
        task_context.update(extra_context)
        record.context = task_context

        return True


class Sqs2HttpLogger(logging.Logger):
    """A custom logger class with a 'contextualize' method."""

    @contextmanager
    def contextualize(self, **kwargs: Any) -> Iterator[None]:
        """A context manager to add temporary context to logs.

        Example:
            with logger.contextualize(message_id="12345"):
                logger.info("This log will have the message_id.")
        """
        token = _context_store.set({**_context_store.get(), **kwargs})
        try:
            yield
        finally:
            _context_store.reset(token)


class TextFormatter(logging.Formatter):
    """Formats logs as a human-readable string."""

    def format(self, record: logging.LogRecord) -> str:
        log_message = super().format(record)

        if hasattr(record, "context") and record.context:
            context_text = " ".join(
                f"{k}={v}" for k, v in record.context.items() if v is not None and v != ""
            )
            if context_text:
                log_message += f" | {context_text}"

        return log_message


class JsonFormatter(logging.Formatter):
    """Formats logs as a JSON string."""

    def format(self, record: logging.LogRecord) -> str:
        log_object = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "thread": record.thread,
            **getattr(record, "context", {}),
        }

        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, indent=None, separators=(",", ":"), default=str)


def setup_logger(log_level: int | None = None, log_serialize: bool | None = None) -> Sqs2HttpLogger:
    """Enables and configures the sqs2http logger.

    Arguments left as None are read from SQS2HTTP_LOG_LEVEL and
    SQS2HTTP_ENABLE_LOG_SERIALIZE.
    """
    if log_level is None:
        log_level = int(os.getenv("SQS2HTTP_LOG_LEVEL", logging.INFO))

    if log_serialize is None:
        log_serialize = bool(int(os.getenv("SQS2HTTP_ENABLE_LOG_SERIALIZE", 0)))

    logging.setLoggerClass(Sqs2HttpLogger)
    logger = logging.getLogger("sqs2http")
    logging.setLoggerClass(logging.Logger)

    if logger.hasHandlers():
        logger.handlers.clear()

    logger.setLevel(log_level)
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ContextFilter())

    formatter: logging.Formatter = JsonFormatter()
    if not log_serialize:
        fmt = (
            "%(asctime)s | %(levelname)-8s "
            "| %(process)d:%(thread)d "
            "| %(module)s:%(funcName)s:%(lineno)d "
            "| %(message)s"
        )
        formatter = TextFormatter(fmt)

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return cast(Sqs2HttpLogger, logger)


logger: Sqs2HttpLogger = setup_logger()
