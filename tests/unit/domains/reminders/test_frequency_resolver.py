"""
Unit tests for the medication frequency resolver.
"""

from datetime import time

import pytest

from mamacare.domains.reminders.domain.services.frequency_resolver import (
    DEFAULT_TIMES,
    resolve_frequency,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ("once daily", (time(9, 0),)),
        ("Twice  Daily", (time(9, 0), time(21, 0))),
        ("3 times daily", (time(8, 0), time(14, 0), time(20, 0))),
        ("four times a day", (time(8, 0), time(12, 0), time(16, 0), time(20, 0))),
        ("every 8 hours", (time(0, 0), time(8, 0), time(16, 0))),
        ("every 12 hours", (time(8, 0), time(20, 0))),
        ("at bedtime", (time(21, 0),)),
        ("before meals", (time(7, 30), time(12, 30), time(18, 30))),
    ],
)
def test_known_frequencies(text, expected):
    assert resolve_frequency(text) == expected


@pytest.mark.unit
def test_generic_every_n_hours_anchored_in_the_morning():
    assert resolve_frequency("every 3 hours") == tuple(time(h, 0) for h in (2, 5, 8, 11, 14, 17, 20, 23))
    assert resolve_frequency("every 24h") == (time(8, 0),)


@pytest.mark.unit
@pytest.mark.parametrize("text", [None, "", "   ", "as needed", "every 0 hours", "every 99 hours", "🍼", "x" * 500])
def test_resolver_is_total(text):
    times = resolve_frequency(text)

    assert times
    assert times == DEFAULT_TIMES or all(isinstance(t, time) for t in times)


@pytest.mark.unit
def test_unknown_text_falls_back_to_morning_dose():
    assert resolve_frequency("whenever") == (time(9, 0),)


@pytest.mark.unit
def test_frequency_text_is_normalized():
    assert resolve_frequency("  Twice\tDAILY ") == (time(9, 0), time(21, 0))
    assert resolve_frequency(None) == DEFAULT_TIMES
