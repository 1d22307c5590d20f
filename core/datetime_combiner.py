"""
Combines a parsed date with a time-of-day mention such as "2:30pm" or "9 AM"
"""

import re
from datetime import datetime, time
from typing import Optional

from .date_parser import DateParser
from .parse_result import Failure, ParseResult, Success


def parse_time_of_day(time_text: str) -> ParseResult:
    """Parse "12:30pm" / "12pm" style text into a time, converting to 24-hour"""
    is_pm = 'pm' in time_text.lower()

    try:
        if ':' in time_text:
            hour_text, minute_text = re.sub(r'[^0-9:]', '', time_text).split(':')[:2]
            hours = int(hour_text)
            minutes = int(minute_text)
        else:
            hours = int(re.sub(r'[^0-9]', '', time_text))
            minutes = 0
    except ValueError as e:
        return Failure(f'Error parsing time "{time_text}": {e}')

    if is_pm and hours < 12:
        hours += 12
    if not is_pm and hours == 12:
        hours = 0

    try:
        return Success(time(hours, minutes))
    except ValueError as e:
        return Failure(f'Error parsing time "{time_text}": {e}')


class DateTimeCombiner:
    def __init__(self, date_parser: Optional[DateParser] = None):
        self.date_parser = date_parser or DateParser()

    def combine(self, date_text: str, time_text: str) -> ParseResult:
        """Merge a date string and a time string into one naive datetime"""
        parsed_date = self.date_parser.parse(date_text)
        if not parsed_date.ok:
            return parsed_date

        parsed_time = parse_time_of_day(time_text)
        if not parsed_time.ok:
            return parsed_time

        return Success(datetime.combine(parsed_date.value, parsed_time.value))
