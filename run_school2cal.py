#!/usr/bin/env python3
"""
School2Cal - Single Entry Point
Unified script with all features accessible through command-line options
"""

import sys
import argparse

from core.calendar_writer import GoogleCalendar
from core.config import School2CalConfig, load_config
from core.event_ingestor import EventIngestor
from core.gmail_mailbox import GmailMailbox
from core.google_auth import build_services
from core.scheduler import run_daily
from utils.check_calendar import check_recent_events
from utils.preview_emails import preview_emails


def load_settings(args) -> School2CalConfig:
    """Load configuration, exiting with a message when it is incomplete"""
    try:
        config = load_config(getattr(args, 'config', None))
    except ValueError as e:
        print(f"[!] Error loading settings: {e}")
        print("[!] Set SEARCH_QUERY and TARGET_CALENDAR_ID in school2cal.yaml, .env or your settings sheet")
        sys.exit(1)

    if getattr(args, 'days', None):
        config.days_to_look_back = args.days
    return config


def connect(config: School2CalConfig):
    """Authenticate and return (mailbox, calendar) collaborators"""
    print("[*] Authenticating with Google APIs...")
    gmail_service, calendar_service = build_services(config)
    mailbox = GmailMailbox(gmail_service, config.gmail_user_id)
    calendar = GoogleCalendar(calendar_service, config.target_calendar_id, config.time_zone)
    return mailbox, calendar


def process_school_emails(config: School2CalConfig) -> dict:
    """Search, extract and create calendar events once"""
    mailbox, calendar = connect(config)
    return EventIngestor(config, mailbox, calendar).run()


def preview(config: School2CalConfig):
    """Show candidate events without writing to the calendar"""
    print("[*] PREVIEW MODE - No calendar events will be created")
    print("=" * 60)
    mailbox, _calendar = connect(config)
    preview_emails(config, mailbox)


def test_calendar(config: School2CalConfig) -> bool:
    """Verify the calendar ID by creating a test event"""
    print("[*] CALENDAR TEST - Creating a test event tomorrow")
    print("=" * 60)
    _mailbox, calendar = connect(config)
    return calendar.test_access()


def check_calendar(config: School2CalConfig):
    """Check current calendar events"""
    print("[*] CALENDAR CHECK - Viewing current events")
    print("=" * 60)
    _gmail_service, calendar_service = build_services(config)
    check_recent_events(calendar_service, config.target_calendar_id)


def daily(config: School2CalConfig):
    """Process school emails every day at the configured hour"""
    print(f"[*] DAILY MODE - Processing emails every day at {config.daily_run_hour:02d}:00")
    print("=" * 60)
    run_daily(lambda: process_school_emails(config), hour=config.daily_run_hour)


def main():
    """Main entry point with command-line options"""
    parser = argparse.ArgumentParser(
        description='School2Cal - school email to calendar converter',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_school2cal.py --run             # Process recent school emails once
  python run_school2cal.py --preview         # Show events that would be created
  python run_school2cal.py --test-calendar   # Create a test event to verify access
  python run_school2cal.py --check           # View current calendar events
  python run_school2cal.py --daily           # Run every day at the configured hour
  python run_school2cal.py                   # Interactive mode (default)
        """
    )

    parser.add_argument('--run', action='store_true',
                        help='Process recent school emails once')
    parser.add_argument('--preview', action='store_true',
                        help='Show candidate events without creating them')
    parser.add_argument('--test-calendar', action='store_true',
                        help='Verify calendar access by creating a test event')
    parser.add_argument('--check', action='store_true',
                        help='Check current calendar events')
    parser.add_argument('--daily', action='store_true',
                        help='Keep running and process emails once a day')
    parser.add_argument('--days', type=int,
                        help='Override the number of days to look back')
    parser.add_argument('--config',
                        help='Path to a YAML settings file (default: school2cal.yaml)')

    args = parser.parse_args()

    if not (args.run or args.preview or args.test_calendar or args.check or args.daily):
        interactive_mode(args)
        return

    config = load_settings(args)

    if args.run:
        process_school_emails(config)
    elif args.preview:
        preview(config)
    elif args.test_calendar:
        if not test_calendar(config):
            sys.exit(1)
    elif args.check:
        check_calendar(config)
    elif args.daily:
        daily(config)


def interactive_mode(args):
    """Interactive mode for selecting options"""
    print("""
[*] School2Cal - School Email to Calendar
=========================================

Select an option:

1. Process recent school emails
2. Preview events (no calendar changes)
3. Test calendar access
4. Check current calendar events
5. Run daily
6. Exit

""")

    try:
        choice = input("Enter choice (1-6): ").strip()

        if choice == '6':
            print("Goodbye!")
            sys.exit(0)

        actions = {
            '1': process_school_emails,
            '2': preview,
            '3': test_calendar,
            '4': check_calendar,
            '5': daily,
        }
        if choice not in actions:
            print("Invalid choice. Please enter 1-6.")
            interactive_mode(args)
            return

        actions[choice](load_settings(args))

    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(0)


if __name__ == "__main__":
    main()
