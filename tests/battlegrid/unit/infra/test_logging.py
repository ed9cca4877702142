from __future__ import annotations

import json
import logging

from battlegrid.infra.logging import (
    JsonFormatter,
    LoggingConfig,
    configure_logging,
    resolve_log_level_name,
    setup_logging,
    shutdown_logging,
)


def test_battlegrid_log_level_wins_over_generic(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.delenv("BATTLEGRID_LOG_LEVEL", raising=False)
    assert resolve_log_level_name() == "WARNING"
    monkeypatch.setenv("BATTLEGRID_LOG_LEVEL", " debug ")
    assert resolve_log_level_name() == "DEBUG"


def test_resolve_log_level_default(monkeypatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("BATTLEGRID_LOG_LEVEL", raising=False)
    assert resolve_log_level_name("error") == "ERROR"


def test_json_formatter_keeps_extra_fields() -> None:
    record = logging.LogRecord("battlegrid.test", logging.INFO, __file__, 1, "shot target=%s", ("A1",), None)
    record.turn = 3
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "battlegrid.test"
    assert payload["msg"] == "shot target=A1"
    assert payload["fields"] == {"turn": 3}


def test_setup_logging_replaces_root_handlers(monkeypatch) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    sentinel = logging.NullHandler()
    try:
        root.handlers.clear()
        root.addHandler(sentinel)
        monkeypatch.delenv("BATTLEGRID_LOG_FILE", raising=False)
        monkeypatch.setenv("BATTLEGRID_LOG_LEVEL", "DEBUG")
        setup_logging()
        assert sentinel not in root.handlers
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


def test_file_output_goes_through_queue_listener(tmp_path) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    log_file = tmp_path / "logs" / "battlegrid.log"
    try:
        configure_logging(LoggingConfig(level_name="INFO", file_path=str(log_file)))
        logging.getLogger("battlegrid.test").info("match_over winner=%s", "player")
        shutdown_logging()
        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["msg"] == "match_over winner=player"
    finally:
        shutdown_logging()
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)
