from __future__ import annotations

from datetime import date


def default_start_date(today: date | None = None) -> date:
    current = today or date.today()
    return current.replace(day=1)


def default_end_date(today: date | None = None) -> date:
    return today or date.today()


def format_api_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def resolve_date_range(
    start_date: date | None,
    end_date: date | None,
    *,
    today: date | None = None,
) -> tuple[date, date]:
    """Fill in the month-to-date defaults and reject inverted ranges."""
    start = start_date or default_start_date(today)
    end = end_date or default_end_date(today)
    if end < start:
        raise ValueError(f"end_date {format_api_date(end)} is before start_date {format_api_date(start)}")
    return start, end


def parse_client_ids(raw: str | None) -> list[str]:
    if raw is None:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]
