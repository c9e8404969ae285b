"""
Tests for the logging setup.
"""

import json
import logging

import pytest

from mamacare.core.shared.logger import EnvironmentFilter, JSONFormatter, configure_logging


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("mamacare.jobs", logging.INFO, __file__, 10, "Job %s finished", ("cleanup",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
def test_json_formatter_includes_extra_data():
    record = make_record(extra_data={"job": "reminder_cleanup", "affected": 3})
    EnvironmentFilter("test").filter(record)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Job cleanup finished"
    assert payload["level"] == "INFO"
    assert payload["environment"] == "test"
    assert payload["extra"] == {"job": "reminder_cleanup", "affected": 3}


@pytest.mark.unit
def test_configure_logging_quiets_scheduler_logs():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging(level="debug", format_type="json", environment="test")

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("apscheduler").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
