"""Tests for JSON log output."""
from __future__ import annotations

import io
import json
import logging

import pytest

from legal_research.logging import configure_logging, get_logger


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    configure_logging("INFO", stream=stream)
    yield stream
    configure_logging()


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


def test_structlog_events_are_json(log_stream):
    get_logger("legal_research.aggregator").info("aggregator.merged", total=3)

    [event] = _lines(log_stream)
    assert event["event"] == "aggregator.merged"
    assert event["total"] == 3
    assert event["level"] == "info"
    assert "timestamp" in event


def test_stdlib_records_share_the_format(log_stream):
    logging.getLogger("legal_research.sources.base").warning("congress search failed (timeout): timeout")

    [event] = _lines(log_stream)
    assert event["event"] == "congress search failed (timeout): timeout"
    assert event["level"] == "warning"
    assert event["logger"] == "legal_research.sources.base"


def test_level_filters(log_stream):
    configure_logging("WARNING", stream=log_stream)
    get_logger().info("aggregator.merged")
    logging.getLogger("legal_research").info("dropped")
    assert _lines(log_stream) == []
