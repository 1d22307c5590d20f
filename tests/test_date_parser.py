"""Tests for DateParser."""

from datetime import date, datetime

import pytest

from core.date_parser import DateParser, month_number
from core.parse_result import Failure, Success


@pytest.fixture
def parser(fixed_clock) -> DateParser:
    return DateParser(clock=fixed_clock)


class TestNumericDates:
    """MM/DD/YYYY and MM/DD/YY shapes."""

    def test_four_digit_year(self, parser):
        assert parser.parse("03/04/2024") == Success(date(2024, 3, 4))

    def test_two_digit_year_is_21st_century(self, parser):
        assert parser.parse("03/04/24") == Success(date(2024, 3, 4))

    def test_single_digit_month_and_day(self, parser):
        assert parser.parse("5/1/2025").value == date(2025, 5, 1)

    def test_surrounding_whitespace_ignored(self, parser):
        assert parser.parse("  12/25/2025 ").value == date(2025, 12, 25)

    def test_impossible_day_fails(self, parser):
        result = parser.parse("02/30/2025")
        assert isinstance(result, Failure)
        assert not result.ok

    def test_impossible_month_fails(self, parser):
        assert not parser.parse("13/45/2025").ok

    def test_three_digit_year_fails(self, parser):
        result = parser.parse("1/2/202")
        assert not result.ok
        assert "2 or 4 digit year" in result.reason


class TestMonthNameDates:
    """Month DD, YYYY and Month DD shapes."""

    def test_ordinal_suffix_stripped(self, parser):
        assert parser.parse("March 4th, 2024") == Success(date(2024, 3, 4))

    def test_abbreviated_month(self, parser):
        assert parser.parse("Sept 5, 2025").value == date(2025, 9, 5)
        assert parser.parse("Oct 31, 2025").value == date(2025, 10, 31)

    def test_month_name_case_insensitive(self, parser):
        assert parser.parse("NOVEMBER 21st, 2025").value == date(2025, 11, 21)

    def test_missing_year_uses_clock_year(self, parser):
        assert parser.parse("March 4").value == date(2026, 3, 4)
        assert parser.parse("jan 2nd").value == date(2026, 1, 2)

    def test_missing_year_follows_injected_clock(self):
        parser = DateParser(clock=lambda: datetime(2031, 1, 1))
        assert parser.parse("May 9").value == date(2031, 5, 9)

    def test_unknown_month_name_fails(self, parser):
        assert not parser.parse("Smarch 4, 2025").ok


class TestGenericFallback:
    """Shapes handed to the generic parser."""

    def test_iso_date(self, parser):
        assert parser.parse("2024-03-04") == Success(date(2024, 3, 4))

    def test_hyphenated_month_first(self, parser):
        assert parser.parse("11-05-2025").value == date(2025, 11, 5)


class TestFailures:
    """Garbage never raises."""

    def test_garbage(self, parser):
        result = parser.parse("not a date")
        assert not result.ok
        assert "not a date" in result.reason

    def test_empty(self, parser):
        assert not parser.parse("").ok
        assert not parser.parse("   ").ok

    def test_none(self, parser):
        assert not parser.parse(None).ok


class TestMonthNumber:
    def test_full_and_short_names(self):
        assert month_number("February") == 2
        assert month_number("feb") == 2
        assert month_number("Sept") == 9
        assert month_number("Dec.") == 12

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError):
            month_number("Brumaire")
