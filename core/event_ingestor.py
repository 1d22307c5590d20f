"""
School2Cal - scans school emails for dates and adds them to a shared calendar
"""

from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .config import School2CalConfig
from .event_extractor import CandidateEvent, EventExtractor, deduplicate_candidates

MAX_TITLE_LENGTH = 100
EVENT_DURATION = timedelta(minutes=60)


def build_event_title(prefix: str, candidate: CandidateEvent, subject: str) -> str:
    """Prefix + description (or the email subject), capped at 100 characters"""
    title = prefix + (candidate.description or subject)
    if len(title) > MAX_TITLE_LENGTH:
        title = title[:MAX_TITLE_LENGTH - 3] + "..."
    return title


def build_event_description(subject: str, sender: str, candidate: CandidateEvent) -> str:
    return f'Event from email: "{subject}"\nFrom: {sender}\n\n{candidate.description or ""}'


class EventIngestor:
    def __init__(self, config: School2CalConfig, mailbox, calendar,
                 extractor: Optional[EventExtractor] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.config = config
        self.mailbox = mailbox
        self.calendar = calendar
        self.clock = clock or datetime.now
        self.extractor = extractor or EventExtractor(clock=self.clock)

    def find_threads(self):
        since_date = (self.clock() - timedelta(days=self.config.days_to_look_back)).date()
        print(f'[*] Starting search with query: "{self.config.search_query}" '
              f'for emails in the last {self.config.days_to_look_back} days')
        return self.mailbox.search(self.config.search_query, since_date)

    def run(self) -> Dict[str, int]:
        """Process every unlabelled thread that matches the configured search"""
        stats = {
            'threads_found': 0,
            'threads_processed': 0,
            'threads_skipped': 0,
            'events_created': 0,
            'errors': 0
        }

        try:
            label = self.mailbox.get_or_create_label(self.config.label_name)
            threads = self.find_threads()
        except Exception as e:
            print(f"[-] Error reading Gmail: {e}")
            stats['errors'] += 1
            return stats

        stats['threads_found'] = len(threads)

        if not threads:
            print("[!] No emails found matching the search criteria.")
            return stats

        print(f"[*] Found {len(threads)} email threads to process.")

        for thread in threads:
            if thread.messages:
                first_message = thread.messages[0]
                print(f'\n[*] Processing thread: "{first_message.subject}" from {first_message.sender}')

            if thread.has_label(label):
                print("[>] Skipping thread - already processed")
                stats['threads_skipped'] += 1
                continue

            for message in thread.messages:
                try:
                    stats['events_created'] += self.process_email(message)
                except Exception as e:
                    print(f"[-] Error processing email {message.id}: {e}")
                    stats['errors'] += 1

            try:
                thread.add_label(label)
            except Exception as e:
                print(f"[-] Error labelling thread {thread.id}: {e}")
                stats['errors'] += 1
            stats['threads_processed'] += 1

        print(f"\n[*] PROCESSING COMPLETE")
        print(f"{'='*50}")
        print(f"Threads processed: {stats['threads_processed']}")
        print(f"Threads skipped: {stats['threads_skipped']}")
        print(f"Calendar events created: {stats['events_created']}")
        print(f"Errors: {stats['errors']}")
        return stats

    def process_email(self, message) -> int:
        """Extract candidates from one message and add them to the calendar"""
        subject = message.subject
        body = message.plain_text_body

        print(f'[*] Processing email: "{subject}" from {message.sender}')
        preview = body[:200].replace('\n', ' ')
        print(f"[DEBUG] Email preview: {preview}...")

        candidates = self.extractor.extract(subject, body)
        if self.config.deduplicate:
            candidates = deduplicate_candidates(candidates)

        if not candidates:
            print("[!] No event details found in this email.")
            return 0

        print(f"[+] Found {len(candidates)} potential events in this email")

        created = 0
        for candidate in candidates:
            when = candidate.date_time if candidate.has_time and candidate.date_time else candidate.date
            print(f"[*] Attempting to create event: {candidate.description} on {when}")
            try:
                event_id = self.add_event_to_calendar(candidate, message.sender_address, subject)
            except Exception as e:
                print(f"[-] Error creating calendar event: {e}")
                continue
            if event_id:
                created += 1

        return created

    def add_event_to_calendar(self, candidate: CandidateEvent, sender: str, subject: str) -> Optional[str]:
        title = build_event_title(self.config.event_title_prefix, candidate, subject)
        description = build_event_description(subject, sender, candidate)

        if candidate.has_time and candidate.date_time:
            start = candidate.date_time
            event_id = self.calendar.create_timed_event(title, start, start + EVENT_DURATION, description)
        else:
            event_id = self.calendar.create_all_day_event(title, candidate.date, description)

        if event_id:
            print(f'[+] Created event: "{title}" on {candidate.date}')
        return event_id
