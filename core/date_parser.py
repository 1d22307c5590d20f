"""
Date parser for the date shapes found in school emails
"""

import re
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from dateutil import parser as dateutil_parser

from .parse_result import Failure, ParseResult, Success

MONTHS = {
    'january': 1, 'february': 2, 'march': 3, 'april': 4,
    'may': 5, 'june': 6, 'july': 7, 'august': 8,
    'september': 9, 'october': 10, 'november': 11, 'december': 12
}
MONTHS.update({name[:3]: number for name, number in list(MONTHS.items())})
MONTHS['sept'] = 9

NUMERIC_FULL_YEAR = re.compile(r'(\d{1,2})/(\d{1,2})/(\d{4})')
NUMERIC_SHORT_YEAR = re.compile(r'(\d{1,2})/(\d{1,2})/(\d{2})')
NUMERIC_OTHER_YEAR = re.compile(r'\d{1,2}/\d{1,2}/\d+')
MONTH_DAY_YEAR = re.compile(r'([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,\s*(\d{4})', re.IGNORECASE)
MONTH_DAY = re.compile(r'([A-Za-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?', re.IGNORECASE)


def month_number(name: str) -> int:
    """Map a full or abbreviated English month name to 1-12"""
    number = MONTHS.get(name.strip().lower().rstrip('.'))
    if number is None:
        raise ValueError(f"Unknown month name: {name}")
    return number


class DateParser:
    """Turns a matched date substring into a calendar date.

    Shapes are checked in a fixed priority order because they overlap textually:
    numeric shapes first, then year-qualified month names, then year-less month
    names (which take the current year from ``clock``), and finally a generic
    parser for anything else (hyphenated and ISO dates).
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now
        self.rules: List[Tuple[str, re.Pattern, Callable[[re.Match], date]]] = [
            ('MM/DD/YYYY', NUMERIC_FULL_YEAR, self._numeric_full_year),
            ('MM/DD/YY', NUMERIC_SHORT_YEAR, self._numeric_short_year),
            ('MM/DD/other', NUMERIC_OTHER_YEAR, self._unsupported_year),
            ('Month DD, YYYY', MONTH_DAY_YEAR, self._month_day_year),
            ('Month DD', MONTH_DAY, self._month_day),
        ]

    def parse(self, text: str) -> ParseResult:
        """Parse a date string, returning Success(date) or Failure(reason)"""
        if not text or not text.strip():
            return Failure("empty date string")

        candidate = text.strip()
        try:
            for _name, pattern, build in self.rules:
                match = pattern.fullmatch(candidate)
                if match:
                    return Success(build(match))
            return Success(self._generic(candidate))
        except Exception as e:
            return Failure(f'Error parsing date string "{text}": {e}')

    def _numeric_full_year(self, match: re.Match) -> date:
        month, day, year = match.groups()
        return date(int(year), int(month), int(day))

    def _numeric_short_year(self, match: re.Match) -> date:
        # All two digit years are taken to be 20xx
        month, day, year = match.groups()
        return date(2000 + int(year), int(month), int(day))

    def _unsupported_year(self, match: re.Match) -> date:
        raise ValueError("numeric dates need a 2 or 4 digit year")

    def _month_day_year(self, match: re.Match) -> date:
        month_name, day, year = match.groups()
        return date(int(year), month_number(month_name), int(day))

    def _month_day(self, match: re.Match) -> date:
        month_name, day = match.groups()
        return date(self.clock().year, month_number(month_name), int(day))

    def _generic(self, text: str) -> date:
        default = datetime(self.clock().year, 1, 1)
        return dateutil_parser.parse(text, default=default).date()
