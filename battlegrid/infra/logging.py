"""Logging pipeline setup for battlegrid processes."""

from __future__ import annotations

import json
import logging
import os
import queue
from dataclasses import dataclass
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

__all__ = [
    "JsonFormatter",
    "LoggingConfig",
    "configure_logging",
    "resolve_log_level_name",
    "setup_logging",
    "shutdown_logging",
]

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_file_listener: QueueListener | None = None

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Where log records go and how they are rendered."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json


class JsonFormatter(logging.Formatter):
    """One JSON object per record; `extra=` values are kept under `fields`."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        if fields:
            entry["fields"] = fields
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True, default=str)


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root handlers according to `config`.

    Console output is written inline. When a log file is configured, every
    handler runs behind a queue listener instead.
    """
    global _file_listener
    shutdown_logging()

    handlers = _build_handlers(config)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, config.level_name.upper(), logging.INFO))

    if not config.file_path:
        root.addHandler(handlers[0])
        return

    records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    root.addHandler(QueueHandler(records))
    _file_listener = QueueListener(records, *handlers, respect_handler_level=True)
    _file_listener.start()


def shutdown_logging() -> None:
    """Flush and stop the file queue listener if one is running."""
    global _file_listener
    if _file_listener is not None:
        _file_listener.stop()
        _file_listener = None


def resolve_log_level_name(default: str = "INFO") -> str:
    """Resolve the log level; BATTLEGRID_LOG_LEVEL wins over LOG_LEVEL."""
    value = os.getenv("BATTLEGRID_LOG_LEVEL")
    if value is None:
        value = os.getenv("LOG_LEVEL", default)
    return value.strip().upper()


def setup_logging(level_name: str | None = None) -> None:
    """Configure process logging from environment."""
    file_path = os.getenv("BATTLEGRID_LOG_FILE", "").strip() or None
    configure_logging(
        LoggingConfig(
            level_name=level_name or resolve_log_level_name(),
            console_format=os.getenv("LOG_FORMAT", "text").strip().lower(),
            file_path=file_path,
        )
    )
    if file_path:
        logging.getLogger(__name__).info("logging_file=%s", file_path)


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    console = logging.StreamHandler()
    console.setFormatter(_formatter(config.console_format))
    if not config.file_path:
        return [console]
    path = Path(config.file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    file_handler.setFormatter(_formatter(config.file_format))
    return [console, file_handler]


def _formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT)
