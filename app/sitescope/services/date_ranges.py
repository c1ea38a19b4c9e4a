from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from app.sitescope.core.error_catalog import AppError, ErrorCatalog


@dataclass(frozen=True)
class DateRange:
    start_date: date
    end_date: date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


def parse_date(value: str | None, field: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "invalid date", "field": field},
        ) from exc


def resolve_date_range(
    from_value: str | None,
    to_value: str | None,
    *,
    default_days: int = 30,
    today: date | None = None,
) -> DateRange:
    today = today or date.today()
    end_date = parse_date(to_value, "to") or today
    start_date = parse_date(from_value, "from") or end_date - timedelta(days=default_days - 1)
    if end_date < start_date:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"message": "to must be after from", "reason_code": "DATE_RANGE_INVERTED"},
        )
    return DateRange(start_date=start_date, end_date=end_date)


def validate_date_range(date_range: DateRange, *, max_days: int) -> None:
    if max_days <= 0:
        return
    if date_range.days > max_days:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={
                "message": "date range exceeds limit",
                "reason_code": "DATE_RANGE_LIMIT_EXCEEDED",
                "max_days": max_days,
            },
        )
