#!/usr/bin/env python3
"""
Check what events are in the calendar
"""

from datetime import datetime, timedelta
from typing import Dict, List

from googleapiclient.errors import HttpError


def check_recent_events(service, calendar_id: str, days_back: int = 30, days_ahead: int = 60) -> List[Dict]:
    """List events around today, marking the ones School2Cal created"""
    print("[*] Checking recent calendar events...")

    now = datetime.utcnow()
    time_min = (now - timedelta(days=days_back)).isoformat() + 'Z'
    time_max = (now + timedelta(days=days_ahead)).isoformat() + 'Z'

    try:
        events_result = service.events().list(
            calendarId=calendar_id,
            timeMin=time_min,
            timeMax=time_max,
            maxResults=50,
            singleEvents=True,
            orderBy='startTime'
        ).execute()
    except HttpError as error:
        print(f"[-] Error fetching events: {error}")
        return []

    events = events_result.get('items', [])
    print(f"[*] Found {len(events)} recent events")

    for i, event in enumerate(events, 1):
        start = event.get('start', {})
        date_str = start.get('dateTime', start.get('date', 'No date'))
        title = event.get('summary', 'No title')

        private = event.get('extendedProperties', {}).get('private', {})
        source_info = " [School2Cal]" if 'school2cal_created_at' in private else ""

        print(f"{i:2d}. {date_str[:16]} - {title[:60]}{source_info}")
        print(f"    ID: {event.get('id', 'No ID')}")

    return events
