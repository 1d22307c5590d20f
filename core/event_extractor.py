"""
Pattern-based extraction of candidate calendar events from email text
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, List, NamedTuple, Optional

from .date_parser import DateParser
from .datetime_combiner import DateTimeCombiner

MONTH_NAMES = (
    r'(?:January|February|March|April|May|June|July|August|September|October|November|December'
    r'|Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)'
)

CONTEXT_RADIUS = 100
DESCRIPTION_LENGTH = 150


class DatePattern(NamedTuple):
    name: str
    regex: re.Pattern


DATE_PATTERNS = [
    DatePattern('MM/DD/YYYY or MM/DD/YY', re.compile(r'\b\d{1,2}/\d{1,2}/\d{2,4}\b')),
    DatePattern('Month DD, YYYY', re.compile(
        r'\b' + MONTH_NAMES + r'\s+\d{1,2}(?:st|nd|rd|th)?,\s+\d{4}\b', re.IGNORECASE)),
    DatePattern('Month DD', re.compile(
        r'\b' + MONTH_NAMES + r'\s+\d{1,2}(?:st|nd|rd|th)?\b', re.IGNORECASE)),
    DatePattern('MM-DD-YYYY', re.compile(r'\b\d{1,2}-\d{1,2}-\d{4}\b')),
    DatePattern('YYYY-MM-DD', re.compile(r'\b\d{4}-\d{1,2}-\d{1,2}\b')),
]

TIME_PATTERN = re.compile(r'\b(?:\d{1,2}:\d{2}\s*(?:am|pm)|\d{1,2}\s*(?:am|pm))\b', re.IGNORECASE)


@dataclass(frozen=True)
class CandidateEvent:
    """An event found in email text, not yet written to a calendar"""
    date: date
    date_time: Optional[datetime]
    has_time: bool
    description: str


class EventExtractor:
    def __init__(self, clock: Optional[Callable[[], datetime]] = None,
                 patterns: Optional[List[DatePattern]] = None):
        self.date_parser = DateParser(clock)
        self.combiner = DateTimeCombiner(self.date_parser)
        self.patterns = patterns if patterns is not None else DATE_PATTERNS

    def extract(self, subject: str, body: str) -> List[CandidateEvent]:
        """Scan subject and body for dates, nearby times and a short description.

        Every pattern scans the whole text independently, so one date written in a
        shape that two patterns accept (``March 4th, 2024`` is also a bare
        ``March 4th``) produces a candidate per pattern. Matches whose date cannot
        be parsed are skipped.
        """
        events = []
        text = f"{subject or ''}\n{body or ''}"

        for pattern in self.patterns:
            for match in pattern.regex.finditer(text):
                date_text = match.group(0)
                parsed = self.date_parser.parse(date_text)
                if not parsed.ok:
                    print(f"[DEBUG] Skipping date match ({pattern.name}): {parsed.reason}")
                    continue

                times = self._find_times(text, match.start())
                description = self._describe(text, match.start(), date_text)

                if times:
                    for time_text in times:
                        combined = self.combiner.combine(date_text, time_text)
                        if not combined.ok:
                            print(f"[DEBUG] Keeping event without time: {combined.reason}")
                        events.append(CandidateEvent(
                            date=parsed.value,
                            date_time=combined.value if combined.ok else None,
                            has_time=True,
                            description=description
                        ))
                else:
                    events.append(CandidateEvent(
                        date=parsed.value,
                        date_time=None,
                        has_time=False,
                        description=description
                    ))

        return events

    def _find_times(self, text: str, position: int) -> List[str]:
        """Time mentions within CONTEXT_RADIUS characters of the date, left to right"""
        start = max(0, position - CONTEXT_RADIUS)
        end = min(len(text), position + CONTEXT_RADIUS)
        return [m.group(0) for m in TIME_PATTERN.finditer(text[start:end])]

    def _describe(self, text: str, position: int, date_text: str) -> str:
        snippet = text[position:position + DESCRIPTION_LENGTH]
        snippet = snippet.replace(date_text, '', 1).strip()
        lines = snippet.splitlines()
        return lines[0] if lines else ''


def deduplicate_candidates(candidates: Iterable[CandidateEvent]) -> List[CandidateEvent]:
    """Drop repeated candidates keyed on (date, date_time, description), keeping order"""
    seen = set()
    unique = []
    for candidate in candidates:
        key = (candidate.date, candidate.date_time, candidate.description)
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)
    return unique
