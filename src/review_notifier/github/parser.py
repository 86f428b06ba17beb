"""
GitHub Payload Parser

Parses GitHub API payloads into pull request, event, comment
and review models.
"""

import logging
from typing import Dict, List, Optional
from datetime import datetime

from ..models.pull_request import Assignee, Comment, Event, PullRequest, Review


logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp ('2024-01-01T12:00:00Z')."""
    if not value:
        return None
    if not isinstance(value, str):
        raise TypeError(f"Expected timestamp string, got {type(value).__name__}")
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def _login(user: Optional[Dict]) -> Optional[str]:
    if not user:
        return None
    if not isinstance(user, dict):
        raise TypeError(f"Expected user object, got {type(user).__name__}")
    return user.get('login')


class GitHubPayloadParser:
    """
    Parser for GitHub API payloads.

    Raw payloads missing required keys raise ``KeyError``; user or
    timestamp fields of the wrong type raise ``TypeError``; malformed
    timestamps raise ``ValueError``.
    """

    def parse_pull_request(self, pr_data: Dict) -> PullRequest:
        """
        Parse pull request data into a PullRequest.

        The author becomes ``owner``; ``requested_reviewers`` become
        ``reviewers`` in the order GitHub lists them.
        """
        updated_at = parse_timestamp(pr_data.get('updated_at'))
        owner = Assignee(
            username=pr_data['user']['login'],
            requested_at=parse_timestamp(pr_data.get('created_at')),
            latest_action=updated_at,
        )
        reviewers = tuple(
            Assignee(username=reviewer['login'])
            for reviewer in pr_data.get('requested_reviewers') or []
        )

        return PullRequest(
            number=pr_data['number'],
            owner=owner,
            reviewers=reviewers,
            title=pr_data.get('title') or '',
            html_url=pr_data.get('html_url') or '',
        )

    def parse_pull_requests(self, pulls_data: List[Dict]) -> List[PullRequest]:
        return [self.parse_pull_request(pr_data) for pr_data in pulls_data]

    def parse_event(self, event_data: Dict) -> Event:
        """Parse one issue event."""
        return Event(
            kind=event_data['event'],
            created_at=parse_timestamp(event_data.get('created_at')),
            actor=_login(event_data.get('actor')),
            requested_reviewer=_login(event_data.get('requested_reviewer')),
            event_id=event_data.get('id'),
        )

    def parse_events(self, events_data: List[Dict]) -> List[Event]:
        events = [self.parse_event(event_data) for event_data in events_data]
        logger.debug(f"Parsed {len(events)} issue events")
        return events

    def parse_comments(self, comments_data: List[Dict]) -> List[Comment]:
        return [
            Comment(
                comment_id=comment['id'],
                author=_login(comment.get('user')),
                body=comment.get('body') or '',
                created_at=parse_timestamp(comment.get('created_at')),
            )
            for comment in comments_data
        ]

    def parse_reviews(self, reviews_data: List[Dict]) -> List[Review]:
        return [
            Review(
                review_id=review['id'],
                author=_login(review.get('user')),
                state=review.get('state') or '',
                submitted_at=parse_timestamp(review.get('submitted_at')),
            )
            for review in reviews_data
        ]
