"""
OAuth for the Gmail and Google Calendar APIs
"""

import os
import pickle
from typing import Tuple

from google.auth.transport.requests import Request
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .config import School2CalConfig

# gmail.modify is needed to apply the processed label
SCOPES = [
    'https://www.googleapis.com/auth/gmail.modify',
    'https://www.googleapis.com/auth/calendar'
]


def get_credentials(credentials_file: str = 'credentials.json', token_file: str = 'token.pickle'):
    """Load cached OAuth credentials, refreshing or running the browser flow when needed"""
    creds = None

    if os.path.exists(token_file):
        with open(token_file, 'rb') as token:
            creds = pickle.load(token)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            flow = InstalledAppFlow.from_client_secrets_file(credentials_file, SCOPES)
            creds = flow.run_local_server(port=0)

        with open(token_file, 'wb') as token:
            pickle.dump(creds, token)

    return creds


def build_services(config: School2CalConfig) -> Tuple[object, object]:
    """Return authenticated (gmail, calendar) API services"""
    creds = get_credentials(config.credentials_file, config.token_file)
    gmail_service = build('gmail', 'v1', credentials=creds)
    calendar_service = build('calendar', 'v3', credentials=creds)
    return gmail_service, calendar_service
