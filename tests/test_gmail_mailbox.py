"""Tests for the Gmail mailbox collaborator."""

import base64
from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

from googleapiclient.errors import HttpError

from core.gmail_mailbox import GmailLabel, GmailMailbox, GmailMessage, extract_plain_text, parse_message


def encode(text):
    return base64.urlsafe_b64encode(text.encode('utf-8')).decode('ascii')


def gmail_message(message_id, subject, body, sender="Lincoln Office <office@lincoln-elementary.org>",
                  label_ids=()):
    return {
        'id': message_id,
        'labelIds': list(label_ids),
        'payload': {
            'mimeType': 'text/plain',
            'headers': [
                {'name': 'Subject', 'value': subject},
                {'name': 'From', 'value': sender},
            ],
            'body': {'data': encode(body)},
        },
    }


def http_error(status=403):
    return HttpError(SimpleNamespace(status=status, reason='Forbidden'), b'forbidden')


def make_service():
    service = MagicMock()
    users = service.users.return_value
    return service, users.threads.return_value, users.labels.return_value


class TestSearch:
    def test_query_pages_and_threads(self):
        service, threads, _labels = make_service()
        threads.list.return_value.execute.side_effect = [
            {'threads': [{'id': 't1'}], 'nextPageToken': 'page2'},
            {'threads': [{'id': 't2'}]},
        ]
        threads.get.return_value.execute.side_effect = [
            {'id': 't1', 'messages': [gmail_message('m1', 'Picture Day', 'March 4th, 2024 at 9am',
                                                    label_ids=['INBOX', 'Label_7'])]},
            {'id': 't2', 'messages': [gmail_message('m2', 'Reminder', 'No school 5/1/2025')]},
        ]
        mailbox = GmailMailbox(service, 'me')

        result = mailbox.search('from:@lincoln-elementary.org', date(2026, 10, 11))

        first_call = threads.list.call_args_list[0]
        assert first_call.kwargs['q'] == 'from:@lincoln-elementary.org after:2026/10/11'
        assert first_call.kwargs['userId'] == 'me'
        assert threads.list.call_args_list[1].kwargs['pageToken'] == 'page2'
        assert [t.id for t in result] == ['t1', 't2']
        assert result[0].messages[0].subject == 'Picture Day'
        assert result[0].messages[0].plain_text_body == 'March 4th, 2024 at 9am'
        assert result[0].label_ids == {'INBOX', 'Label_7'}
        assert result[0].mailbox is mailbox

    def test_http_error_returns_empty(self, capsys):
        service, threads, _labels = make_service()
        threads.list.return_value.execute.side_effect = http_error()

        assert GmailMailbox(service).search('from:@school.org', date(2026, 1, 1)) == []
        assert 'Error searching Gmail' in capsys.readouterr().out


class TestLabels:
    def test_existing_label_reused(self):
        service, _threads, labels = make_service()
        labels.list.return_value.execute.return_value = {
            'labels': [{'id': 'Label_1', 'name': 'Other'}, {'id': 'Label_9', 'name': 'School-Processed'}]
        }

        label = GmailMailbox(service).get_or_create_label('School-Processed')

        assert label == GmailLabel(id='Label_9', name='School-Processed')
        labels.create.assert_not_called()

    def test_missing_label_created(self):
        service, _threads, labels = make_service()
        labels.list.return_value.execute.return_value = {'labels': []}
        labels.create.return_value.execute.return_value = {'id': 'Label_12', 'name': 'School-Processed'}

        label = GmailMailbox(service, 'me').get_or_create_label('School-Processed')

        assert label.id == 'Label_12'
        assert labels.create.call_args.kwargs['body']['name'] == 'School-Processed'

    def test_thread_add_label(self):
        service, threads, _labels = make_service()
        threads.get.return_value.execute.return_value = {
            'id': 't1', 'messages': [gmail_message('m1', 'Hi', 'Hello')]
        }
        mailbox = GmailMailbox(service, 'me')
        thread = mailbox.get_thread('t1')
        label = GmailLabel(id='Label_3', name='School-Processed')

        assert not thread.has_label(label)
        thread.add_label(label)

        threads.modify.assert_called_once_with(userId='me', id='t1', body={'addLabelIds': ['Label_3']})
        assert thread.has_label(label)


class TestMessageParsing:
    def test_sender_address(self):
        message = parse_message(gmail_message('m1', 'Hi', 'Body', sender='Ms. Park <park@school.org>'))

        assert message.sender == 'Ms. Park <park@school.org>'
        assert message.sender_address == 'park@school.org'

    def test_bare_sender_address(self):
        message = GmailMessage(id='m1', subject='', sender='office@school.org', plain_text_body='')
        assert message.sender_address == 'office@school.org'

    def test_plain_part_preferred_over_html(self):
        payload = {
            'mimeType': 'multipart/alternative',
            'parts': [
                {'mimeType': 'text/plain', 'body': {'data': encode('Field trip 11/20/2025')}},
                {'mimeType': 'text/html', 'body': {'data': encode('<p>Field trip <b>11/20/2025</b></p>')}},
            ],
        }
        assert extract_plain_text(payload) == 'Field trip 11/20/2025'

    def test_html_only_converted(self):
        html = '<html>\n<style>p {color: red}</style>\n<body>\n<p>Book fair</p>\n<p>2025-11-03 at 3pm</p>\n</body>\n</html>'
        payload = {
            'mimeType': 'multipart/mixed',
            'parts': [{
                'mimeType': 'multipart/alternative',
                'parts': [{'mimeType': 'text/html', 'body': {'data': encode(html)}}],
            }],
        }
        assert extract_plain_text(payload) == 'Book fair\n2025-11-03 at 3pm'

    def test_missing_headers(self):
        message = parse_message({'id': 'm1', 'payload': {'mimeType': 'text/plain', 'body': {}}})

        assert message.subject == ''
        assert message.sender == ''
        assert message.plain_text_body == ''


class TestThreadFetchFailures:
    def test_missing_thread_skipped(self, capsys):
        service, threads, _labels = make_service()
        threads.list.return_value.execute.return_value = {'threads': [{'id': 'a'}, {'id': 'b'}]}
        threads.get.return_value.execute.side_effect = [
            {'id': 'a', 'messages': [gmail_message('m1', 'Book fair', 'Book fair 11/3/2025')]},
            http_error(404),
        ]

        result = GmailMailbox(service).search('from:@school.org', date(2026, 10, 11))

        assert [t.id for t in result] == ['a']
        assert 'Error fetching thread b' in capsys.readouterr().out
