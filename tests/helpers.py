"""
Shared test doubles and GitHub payload builders.
"""

import base64
import json
from typing import Dict, List, Optional, Tuple

from review_notifier.slack.client import SlackAPIError


OWNER = "redhat-appstudio"
REPOSITORY = "e2e-tests"


def pr_payload(number: int, author: str = "alice", reviewers=(), title: Optional[str] = None) -> Dict:
    return {
        'number': number,
        'title': title or f'Test PR {number}',
        'html_url': f'https://github.com/{OWNER}/{REPOSITORY}/pull/{number}',
        'state': 'open',
        'user': {'login': author},
        'created_at': '2024-03-01T10:00:00Z',
        'updated_at': '2024-03-02T10:00:00Z',
        'requested_reviewers': [{'login': login} for login in reviewers],
    }


def event_payload(kind: str, reviewer: Optional[str] = None, actor: str = "alice",
                  created_at: str = "2024-03-01T10:05:00Z", event_id: int = 1) -> Dict:
    payload = {
        'id': event_id,
        'event': kind,
        'actor': {'login': actor},
        'created_at': created_at,
    }
    if reviewer:
        payload['requested_reviewer'] = {'login': reviewer}
    return payload


def review_payload(author: str, state: str = "APPROVED",
                   submitted_at: Optional[str] = "2024-03-03T10:00:00Z", review_id: int = 1) -> Dict:
    return {
        'id': review_id,
        'user': {'login': author},
        'state': state,
        'submitted_at': submitted_at,
    }


def encode_users(users: List[Dict[str, str]]) -> str:
    return base64.b64encode(json.dumps(users).encode('utf-8')).decode('ascii')


class FakeHost:
    """In-memory PullRequestHost. Failures are keyed by (method, number)."""

    def __init__(self):
        self.pulls: List[Dict] = []
        self.events: Dict[int, List[Dict]] = {}
        self.reviews: Dict[int, List[Dict]] = {}
        self.comments: Dict[int, List[Dict]] = {}
        self.failures: Dict[Tuple[str, Optional[int]], Exception] = {}
        self.calls: List[Tuple[str, Optional[int]]] = []

    def _record(self, method: str, number: Optional[int] = None) -> None:
        self.calls.append((method, number))
        error = self.failures.get((method, number))
        if error is not None:
            raise error

    def list_pull_requests(self, owner, repo, state="open"):
        self._record('list_pull_requests')
        return list(self.pulls)

    def list_issue_comments(self, owner, repo, number):
        self._record('list_issue_comments', number)
        return list(self.comments.get(number, []))

    def list_reviews(self, owner, repo, number):
        self._record('list_reviews', number)
        return list(self.reviews.get(number, []))

    def list_issue_events(self, owner, repo, number):
        self._record('list_issue_events', number)
        return list(self.events.get(number, []))


class RecordingSender:
    """MessageSender that records messages and fails for selected channels."""

    def __init__(self, failing=()):
        self.sent: List[Tuple[str, str]] = []
        self.failing = set(failing)

    def send_message(self, channel_id: str, text: str) -> None:
        if channel_id in self.failing:
            raise SlackAPIError(
                "could not post message: channel_not_found",
                status_code=200,
                error_code="channel_not_found",
            )
        self.sent.append((channel_id, text))
