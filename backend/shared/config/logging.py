"""
Structured logging for the CRUD API.

Loggers returned by `get_logger` accept keyword arguments and attach them to
the record as structured data:

    logger.info("Cascade finished", operation="hard_delete", entity="Comment", total=3)

Records are tagged with the request id and acting user of the current
request. Production (or LOG_JSON=true) emits one JSON object per line;
development gets a colored single-line format.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

_NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
}


def _correlation(record: logging.LogRecord) -> dict[str, str]:
    """Request id and actor set by CorrelationIdFilter, minus placeholders."""
    found = {}
    for key in ("request_id", "actor"):
        value = getattr(record, key, "-")
        if value and value != "-":
            found[key] = value
    return found


class JsonFormatter(logging.Formatter):
    """One JSON document per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_correlation(record),
        }
        data = getattr(record, "extra_data", None)
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            payload["source"] = f"{record.pathname}:{record.lineno}"
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored output for local development."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{clock} {record.levelname:<8}{self.RESET} "

        context = _correlation(record)
        if context:
            tags = " ".join(f"{k}={v[:8]}" for k, v in context.items())
            line += f"{self.DIM}[{tags}]{self.RESET} "

        line += f"{record.name}: {record.getMessage()}"

        data = getattr(record, "extra_data", None)
        if data:
            line += " " + " ".join(f"{k}={v}" for k, v in data.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take structured key/value data."""

    def _emit(self, level: int, msg: str, args: tuple, kwargs: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        extra = kwargs.pop("extra", None) or {}
        extra["extra_data"] = kwargs or None
        self._log(level, msg, args, exc_info=exc_info, extra=extra, stacklevel=3)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.CRITICAL, msg, args, kwargs)


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """Install the stdout handler on the root logger. Safe to call twice."""
    # Import here to avoid circular imports
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = settings.effective_log_level
    use_json = settings.log_json or settings.environment == "production"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(JsonFormatter() if use_json else ConsoleFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, noisy_level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)
    if settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


def get_logger(name: str) -> StructuredLogger:
    """Logger for `name`, created as a StructuredLogger."""
    return logging.getLogger(name)  # type: ignore


api_logger = get_logger("crud_api")
cascade_logger = get_logger("crud_api.cascade")
