"""
Tests for the JSON log formatter.
"""

import json
import logging
import sys

from country_api.core.logging import JSONFormatter, get_logger


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "country_api.test", logging.INFO, __file__, 1, "refreshed %d rows", (5,), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_one_json_object():
    line = JSONFormatter().format(make_record(source="open.er-api.com", duration_ms=12.5))
    entry = json.loads(line)

    assert entry["level"] == "INFO"
    assert entry["logger"] == "country_api.test"
    assert entry["message"] == "refreshed 5 rows"
    assert entry["source"] == "open.er-api.com"
    assert entry["duration_ms"] == 12.5
    assert "endpoint" not in entry


def test_exception_is_included():
    try:
        raise ValueError("boom")
    except ValueError:
        record = make_record()
        record.exc_info = sys.exc_info()

    entry = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in entry["exception"]


def test_loggers_share_the_package_handler():
    first = get_logger("one")
    get_logger("two")

    root = logging.getLogger("country_api")
    assert first.name == "country_api.one"
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
