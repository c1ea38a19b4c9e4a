from datetime import date

import pytest

from app.sitescope.core.error_catalog import AppError, ErrorCatalog
from app.sitescope.services.date_ranges import resolve_date_range, validate_date_range


def test_default_range_ends_today():
    date_range = resolve_date_range(None, None, today=date(2024, 3, 31))

    assert date_range.end_date == date(2024, 3, 31)
    assert date_range.start_date == date(2024, 3, 2)
    assert date_range.days == 30


def test_datetime_strings_are_truncated_to_dates():
    date_range = resolve_date_range("2024-01-01T08:00:00Z", "2024-01-02T23:59:59Z")

    assert date_range.start_date == date(2024, 1, 1)
    assert date_range.end_date == date(2024, 1, 2)


def test_inverted_range():
    with pytest.raises(AppError) as exc:
        resolve_date_range("2024-01-10", "2024-01-01")

    assert exc.value.error == ErrorCatalog.VALIDATION_ERROR
    assert exc.value.details["reason_code"] == "DATE_RANGE_INVERTED"


def test_single_day_range_is_allowed():
    date_range = resolve_date_range("2024-01-01", "2024-01-01")

    assert date_range.days == 1


def test_range_limit():
    date_range = resolve_date_range("2024-01-01", "2024-01-31")

    validate_date_range(date_range, max_days=31)
    validate_date_range(date_range, max_days=0)
    with pytest.raises(AppError):
        validate_date_range(date_range, max_days=30)
