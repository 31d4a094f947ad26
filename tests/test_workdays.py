"""Tests for taskchain.workdays — business-day calendar primitives."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from taskchain.workdays import (
    add_business_days,
    business_day_distance,
    format_date,
    is_business_day,
    next_business_day,
    parse_date,
    roll_forward,
)


def jun(day: int) -> date:
    return date(2025, 6, day)


class TestIsBusinessDay:
    def test_weekdays(self):
        for day in range(2, 7):
            assert is_business_day(jun(day)), jun(day)

    def test_weekend(self):
        assert not is_business_day(jun(7))
        assert not is_business_day(jun(8))


class TestNextBusinessDay:
    def test_midweek_advances_one_day(self):
        assert next_business_day(jun(3)) == jun(4)

    def test_friday_skips_to_monday(self):
        """A Friday is followed by the next Monday, never the weekend."""
        assert next_business_day(jun(6)) == jun(9)

    def test_saturday_and_sunday_go_to_monday(self):
        assert next_business_day(jun(7)) == jun(9)
        assert next_business_day(jun(8)) == jun(9)

    def test_across_month_end(self):
        assert next_business_day(date(2025, 5, 30)) == jun(2)

    def test_always_strictly_after(self):
        d = jun(2)
        for _ in range(20):
            nxt = next_business_day(d)
            assert nxt > d
            assert is_business_day(nxt)
            d = nxt


class TestAddBusinessDays:
    def test_zero_returns_input(self):
        assert add_business_days(jun(7), 0) == jun(7)

    def test_one_week(self):
        assert add_business_days(jun(2), 5) == jun(9)

    def test_matches_repeated_next(self):
        assert add_business_days(jun(4), 3) == next_business_day(
            next_business_day(next_business_day(jun(4)))
        )

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            add_business_days(jun(2), -1)


class TestBusinessDayDistance:
    def test_same_day(self):
        assert business_day_distance(jun(2), jun(2)) == 0

    def test_within_week(self):
        assert business_day_distance(jun(2), jun(5)) == 3

    def test_over_weekend(self):
        """Fri -> Mon counts only the Monday."""
        assert business_day_distance(jun(6), jun(9)) == 1

    def test_end_before_start(self):
        assert business_day_distance(jun(9), jun(2)) == 0

    def test_inverse_of_add(self):
        for n in range(0, 12):
            assert business_day_distance(jun(3), add_business_days(jun(3), n)) == n


class TestRollForward:
    def test_business_day_unchanged(self):
        assert roll_forward(jun(4)) == jun(4)

    def test_weekend_to_monday(self):
        assert roll_forward(jun(7)) == jun(9)
        assert roll_forward(jun(8)) == jun(9)


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2025-06-02") == jun(2)

    def test_timestamp_string(self):
        assert parse_date("2025-06-02T00:00:00Z") == jun(2)
        assert parse_date("2025-06-02 13:45:00") == jun(2)

    def test_date_and_datetime(self):
        assert parse_date(jun(2)) == jun(2)
        assert parse_date(datetime(2025, 6, 2, 17, 30)) == jun(2)

    @pytest.mark.parametrize("bad", ["", "06/02/2025", "2025-13-01", "2025-06-02x", "tomorrow"])
    def test_rejects_garbage(self, bad):
        with pytest.raises(ValueError):
            parse_date(bad)

    def test_rejects_non_string(self):
        with pytest.raises(ValueError):
            parse_date(20250602)  # type: ignore[arg-type]

    def test_format(self):
        assert format_date(jun(9)) == "2025-06-09"
