"""Pytest fixtures for School2Cal tests."""

from datetime import datetime

import pytest

from core.config import School2CalConfig
from core.event_extractor import EventExtractor

FIXED_NOW = datetime(2026, 10, 18, 8, 0, 0)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def extractor(fixed_clock) -> EventExtractor:
    return EventExtractor(clock=fixed_clock)


@pytest.fixture
def config() -> School2CalConfig:
    return School2CalConfig(
        search_query="from:@lincoln-elementary.org",
        target_calendar_id="family@group.calendar.google.com",
    )
