"""
Tests for structlog configuration: settings drive level and format, and
lines go to the configured stream rather than stdout.
"""

from __future__ import annotations

import io
import json

import pytest

from backend_gamescore.config.settings import Settings
from backend_gamescore.gamescore_logging import configure_logging, get_logger


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    yield stream
    configure_logging()


def test_json_lines_follow_settings(log_stream):
    """WARNING level drops info; JSON lines carry event_type and the bound fields."""
    configure_logging(Settings(database_url="sqlite://", log_level="WARNING", log_format="json"), stream=log_stream)
    logger = get_logger("tests.scoring")

    logger.info("activity_score_computed", wallet_id="0xabc")
    logger.warning("batch_wallet_failed", wallet_id="0xabc", code="DATA_UNAVAILABLE")

    lines = log_stream.getvalue().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event_type"] == "batch_wallet_failed"
    assert record["level"] == "warning"
    assert record["logger"] == "tests.scoring"
    assert record["wallet_id"] == "0xabc"
    assert record["code"] == "DATA_UNAVAILABLE"
    assert "timestamp" in record


def test_console_format(log_stream):
    configure_logging(Settings(database_url="sqlite://", log_level="DEBUG", log_format="console"), stream=log_stream)
    get_logger("tests.console").debug("periodic_tick_done", scored=3)
    out = log_stream.getvalue()
    assert "periodic_tick_done" in out
    assert "scored" in out


def test_unknown_level_falls_back_to_info(log_stream):
    configure_logging(Settings(database_url="sqlite://", log_level="CHATTY", log_format="json"), stream=log_stream)
    logger = get_logger("tests.level")
    logger.debug("hidden")
    logger.info("shown")
    events = [json.loads(line)["event_type"] for line in log_stream.getvalue().splitlines()]
    assert events == ["shown"]


def test_store_logs_stay_off_stdout(gamescore_db, capsys):
    """Module loggers never write to stdout."""
    gamescore_db.list_wallet_addresses()
    gamescore_db.init_db()
    assert capsys.readouterr().out == ""
