"""
Gmail access for School2Cal: thread search, message bodies and labels
"""

import base64
from dataclasses import dataclass, field
from datetime import date
from email.utils import parseaddr
from typing import Dict, List, Optional, Set

from bs4 import BeautifulSoup
from googleapiclient.errors import HttpError


@dataclass
class GmailLabel:
    id: str
    name: str


@dataclass
class GmailMessage:
    id: str
    subject: str
    sender: str
    plain_text_body: str

    @property
    def sender_address(self) -> str:
        """Bare address from the From header ("Ms. Park <park@school.org>" -> "park@school.org")"""
        return parseaddr(self.sender)[1] or self.sender


@dataclass
class GmailThread:
    id: str
    messages: List[GmailMessage]
    label_ids: Set[str] = field(default_factory=set)
    mailbox: Optional['GmailMailbox'] = field(default=None, repr=False, compare=False)

    def has_label(self, label: GmailLabel) -> bool:
        return label.id in self.label_ids

    def add_label(self, label: GmailLabel):
        self.mailbox.add_thread_label(self.id, label)
        self.label_ids.add(label.id)


def extract_plain_text(payload: Dict) -> str:
    """Extract the plain text of a message payload.

    text/plain parts are preferred; when a message only carries HTML, the HTML
    parts are converted to text with BeautifulSoup.
    """
    plain_parts = []
    html_parts = []

    def extract_from_part(part):
        if 'parts' in part:
            for subpart in part['parts']:
                extract_from_part(subpart)
            return

        mime_type = part.get('mimeType', '')
        body_data = part.get('body', {}).get('data')
        if not body_data:
            return

        try:
            decoded = base64.urlsafe_b64decode(body_data).decode('utf-8', errors='ignore')
        except (ValueError, TypeError) as e:
            print(f"[!] Error decoding part {mime_type}: {e}")
            return

        if mime_type == 'text/plain':
            plain_parts.append(decoded)
        elif mime_type == 'text/html':
            html_parts.append(decoded)

    extract_from_part(payload)

    if plain_parts:
        return '\n'.join(plain_parts).strip()

    texts = []
    for html in html_parts:
        soup = BeautifulSoup(html, 'html.parser')
        for script in soup(["script", "style"]):
            script.decompose()
        lines = (line.strip() for line in soup.get_text().splitlines())
        texts.append('\n'.join(line for line in lines if line))
    return '\n'.join(texts).strip()


def parse_message(message: Dict) -> GmailMessage:
    """Turn a Gmail API message resource into a GmailMessage"""
    payload = message.get('payload', {})
    headers = payload.get('headers', [])
    subject = next((h['value'] for h in headers if h['name'].lower() == 'subject'), '')
    sender = next((h['value'] for h in headers if h['name'].lower() == 'from'), '')

    return GmailMessage(
        id=message['id'],
        subject=subject,
        sender=sender,
        plain_text_body=extract_plain_text(payload)
    )


class GmailMailbox:
    def __init__(self, service, user_id: str = 'me'):
        self.service = service
        self.user_id = user_id

    def build_query(self, query: str, since_date: date) -> str:
        return f"{query} after:{since_date.strftime('%Y/%m/%d')}"

    def search(self, query: str, since_date: date) -> List[GmailThread]:
        """Find threads matching the query received after since_date"""
        full_query = self.build_query(query, since_date)
        threads = []

        try:
            thread_ids = []
            page_token = None
            while True:
                result = self.service.users().threads().list(
                    userId=self.user_id,
                    q=full_query,
                    pageToken=page_token
                ).execute()
                thread_ids.extend(t['id'] for t in result.get('threads', []))
                page_token = result.get('nextPageToken')
                if not page_token:
                    break

        except HttpError as error:
            print(f"[-] Error searching Gmail with query '{full_query}': {error}")
            return []

        for thread_id in thread_ids:
            try:
                threads.append(self.get_thread(thread_id))
            except HttpError as error:
                print(f"[-] Error fetching thread {thread_id}: {error}")

        return threads

    def get_thread(self, thread_id: str) -> GmailThread:
        thread = self.service.users().threads().get(
            userId=self.user_id,
            id=thread_id,
            format='full'
        ).execute()

        messages = [parse_message(m) for m in thread.get('messages', [])]
        label_ids = set()
        for m in thread.get('messages', []):
            label_ids.update(m.get('labelIds', []))

        return GmailThread(id=thread['id'], messages=messages, label_ids=label_ids, mailbox=self)

    def get_or_create_label(self, name: str) -> GmailLabel:
        """Look up a user label by name, creating it when it does not exist"""
        result = self.service.users().labels().list(userId=self.user_id).execute()
        for label in result.get('labels', []):
            if label.get('name') == name:
                return GmailLabel(id=label['id'], name=name)

        created = self.service.users().labels().create(
            userId=self.user_id,
            body={
                'name': name,
                'labelListVisibility': 'labelShow',
                'messageListVisibility': 'show'
            }
        ).execute()
        print(f"[+] Created Gmail label: {name}")
        return GmailLabel(id=created['id'], name=name)

    def add_thread_label(self, thread_id: str, label: GmailLabel):
        self.service.users().threads().modify(
            userId=self.user_id,
            id=thread_id,
            body={'addLabelIds': [label.id]}
        ).execute()
