"""
Core School2Cal application modules
"""

from .date_parser import DateParser
from .datetime_combiner import DateTimeCombiner
from .event_extractor import CandidateEvent, EventExtractor, deduplicate_candidates
from .event_ingestor import EventIngestor
from .parse_result import Failure, Success

__all__ = [
    'CandidateEvent', 'DateParser', 'DateTimeCombiner', 'EventExtractor',
    'EventIngestor', 'Failure', 'Success', 'deduplicate_candidates'
]
