"""
Google Calendar writer for extracted school events
"""

from datetime import date, datetime, timedelta
from typing import Dict, Optional

from googleapiclient.errors import HttpError


class GoogleCalendar:
    def __init__(self, service, calendar_id: str, time_zone: Optional[str] = None):
        self.service = service
        self.calendar_id = calendar_id
        self._time_zone = time_zone

    def get_calendar(self) -> Optional[Dict]:
        """Fetch the calendar resource, or None when it cannot be accessed"""
        try:
            return self.service.calendars().get(calendarId=self.calendar_id).execute()
        except HttpError as error:
            print(f"[-] Could not find calendar with ID: {self.calendar_id} ({error})")
            return None

    @property
    def time_zone(self) -> str:
        # Naive datetimes are interpreted in the calendar's own zone unless configured
        if not self._time_zone:
            calendar = self.get_calendar() or {}
            self._time_zone = calendar.get('timeZone', 'UTC')
        return self._time_zone

    def create_timed_event(self, title: str, start: datetime, end: datetime,
                           description: str) -> Optional[str]:
        """Create an event with a start and end time and return its ID"""
        event = {
            'summary': title,
            'description': description,
            'start': {'dateTime': start.isoformat(), 'timeZone': self.time_zone},
            'end': {'dateTime': end.isoformat(), 'timeZone': self.time_zone},
        }
        return self._insert(event)

    def create_all_day_event(self, title: str, event_date: date, description: str) -> Optional[str]:
        """Create a single all-day event and return its ID"""
        event = {
            'summary': title,
            'description': description,
            'start': {'date': event_date.isoformat()},
            'end': {'date': (event_date + timedelta(days=1)).isoformat()},
        }
        return self._insert(event)

    def _insert(self, event: Dict) -> Optional[str]:
        event['extendedProperties'] = {
            'private': {
                'school2cal_created_at': datetime.now().isoformat()
            }
        }

        try:
            result = self.service.events().insert(
                calendarId=self.calendar_id,
                body=event
            ).execute()
        except HttpError as error:
            print(f"[-] Error creating calendar event: {error}")
            return None

        return result.get('id')

    def test_access(self) -> bool:
        """Verify the calendar ID by creating a one-hour test event tomorrow"""
        calendar = self.get_calendar()
        if not calendar:
            print("[-] Could not access the calendar - check the Calendar ID")
            return False

        print(f"[+] Successfully accessed calendar: {calendar.get('summary', self.calendar_id)}")

        start = datetime.now().replace(second=0, microsecond=0) + timedelta(days=1)
        event_id = self.create_timed_event(
            "Test Event - Script Setup",
            start,
            start + timedelta(hours=1),
            "This is a test event to verify calendar access. You can delete this."
        )
        if not event_id:
            return False

        print(f"[+] Test event created with ID: {event_id}")
        return True
