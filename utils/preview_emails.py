#!/usr/bin/env python3
"""
Email Preview - show which events would be created, without touching the calendar
"""

from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from core.config import School2CalConfig
from core.event_extractor import CandidateEvent, EventExtractor, deduplicate_candidates


class EmailPreview:
    def __init__(self, config: School2CalConfig, mailbox,
                 clock: Optional[Callable[[], datetime]] = None):
        self.config = config
        self.mailbox = mailbox
        self.clock = clock or datetime.now
        self.extractor = EventExtractor(clock=self.clock)

    def get_school_emails(self, days_back: int = None) -> List:
        """Fetch matching messages from the look-back window"""
        if days_back is None:
            days_back = self.config.days_to_look_back

        since_date = (self.clock() - timedelta(days=days_back)).date()
        print(f"[*] Searching with query: {self.mailbox.build_query(self.config.search_query, since_date)}")

        threads = self.mailbox.search(self.config.search_query, since_date)
        messages = [message for thread in threads for message in thread.messages]
        print(f"[*] Found {len(threads)} threads ({len(messages)} emails)")
        return messages

    def extract_candidates(self, messages: List) -> List[Tuple[object, List[CandidateEvent]]]:
        results = []
        for message in messages:
            candidates = self.extractor.extract(message.subject, message.plain_text_body)
            if self.config.deduplicate:
                candidates = deduplicate_candidates(candidates)
            results.append((message, candidates))
        return results

    def display_summary(self, results: List[Tuple[object, List[CandidateEvent]]]):
        """Print each email with the candidate events found in it"""
        print(f"\n[*] EVENT PREVIEW")
        print("=" * 80)

        if not results:
            print("[!] No emails found matching the filter")
            return

        total = 0
        for i, (message, candidates) in enumerate(results, 1):
            sender_short = message.sender.split('<')[0].strip()
            print(f"{i:2d}. {message.subject[:60]}")
            print(f"    From: {sender_short}")
            if not candidates:
                print("    No events found")
            for candidate in candidates:
                if candidate.has_time and candidate.date_time:
                    when = candidate.date_time.strftime('%Y-%m-%d %H:%M')
                elif candidate.has_time:
                    when = f"{candidate.date.isoformat()} (time unreadable)"
                else:
                    when = f"{candidate.date.isoformat()} (all day)"
                print(f"    - {when}: {candidate.description[:60]}")
            print()
            total += len(candidates)

        print(f"Total emails: {len(results)}")
        print(f"Total candidate events: {total}")


def preview_emails(config: School2CalConfig, mailbox) -> int:
    """Run the preview and return the number of candidate events found"""
    preview = EmailPreview(config, mailbox)
    results = preview.extract_candidates(preview.get_school_emails())
    preview.display_summary(results)
    return sum(len(candidates) for _, candidates in results)
