from datetime import date, datetime, time, timedelta, timezone

import pytest

from opsflow.core.dates import normalize_calendar_date, validate_time_window


@pytest.mark.parametrize("value,expected", [
    ("2025-06-15", date(2025, 6, 15)),
    ("2025-06-15T10:00:00", date(2025, 6, 15)),
    ("2025-06-15T10:00:00Z", date(2025, 6, 15)),
    ("2025-06-15T01:00:00+03:00", date(2025, 6, 14)),
    (datetime(2025, 6, 15, 22, 0, tzinfo=timezone(timedelta(hours=-5))), date(2025, 6, 16)),
    (date(2025, 6, 15), date(2025, 6, 15)),
])
def test_normalize_calendar_date(value, expected):
    assert normalize_calendar_date(value) == expected


def test_normalize_calendar_date_leaves_garbage_to_validation():
    assert normalize_calendar_date("demain") == "demain"


def test_time_window():
    validate_time_window(time(9, 0), time(10, 0))
    validate_time_window(None, time(10, 0))
    with pytest.raises(ValueError):
        validate_time_window(time(10, 0), time(10, 0))
