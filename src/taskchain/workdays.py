"""Business-day calendar primitives (Monday–Friday, no holidays)."""

from __future__ import annotations

from datetime import date, datetime, timedelta

_ONE_DAY = timedelta(days=1)


def is_business_day(d: date) -> bool:
    return d.weekday() < 5


def next_business_day(d: date) -> date:
    """Return the earliest business day strictly after *d*."""
    nxt = d + _ONE_DAY
    while not is_business_day(nxt):
        nxt += _ONE_DAY
    return nxt


def add_business_days(d: date, n: int) -> date:
    """Apply :func:`next_business_day` *n* times. ``n == 0`` returns *d*."""
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    result = d
    for _ in range(n):
        result = next_business_day(result)
    return result


def business_day_distance(start: date, end: date) -> int:
    """Count business days after *start* up to and including *end*."""
    count = 0
    current = start
    while current < end:
        current += _ONE_DAY
        if is_business_day(current):
            count += 1
    return count


def roll_forward(d: date) -> date:
    """Return *d* if it is a business day, else the following Monday."""
    if is_business_day(d):
        return d
    return next_business_day(d)


def parse_date(value: date | datetime | str) -> date:
    """Coerce *value* to a calendar date.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD`` and ISO timestamps
    such as ``2025-06-02T00:00:00Z`` (the time part is dropped).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")
    text = value.strip()
    if len(text) > 10 and text[10] not in "T ":
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}") from None


def format_date(d: date) -> str:
    return d.isoformat()
