"""
Pull Request Data Models

Pull request, issue event, comment and review models built from
GitHub API payloads.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


class EventKind:
    """Issue event kinds the notifier cares about"""
    REVIEW_REQUESTED = "review_requested"
    REVIEW_REQUEST_REMOVED = "review_request_removed"


@dataclass(frozen=True)
class Assignee:
    """GitHub user attached to a pull request"""
    username: str
    requested_at: Optional[datetime] = None
    latest_action: Optional[datetime] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.username:
            raise ValueError("Username cannot be empty")


@dataclass(frozen=True)
class PullRequest:
    """Open pull request with its author and requested reviewers"""
    number: int
    owner: Assignee
    reviewers: Tuple[Assignee, ...] = field(default_factory=tuple)
    title: str = ""
    html_url: str = ""

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("PR number must be positive")

    @property
    def reviewer_usernames(self) -> Tuple[str, ...]:
        return tuple(r.username for r in self.reviewers)


@dataclass(frozen=True)
class Event:
    """Single entry of a pull request's issue event history"""
    kind: str
    created_at: Optional[datetime] = None
    actor: Optional[str] = None
    requested_reviewer: Optional[str] = None
    event_id: Optional[int] = None

    @property
    def is_review_request(self) -> bool:
        return self.kind == EventKind.REVIEW_REQUESTED


@dataclass(frozen=True)
class Comment:
    """Issue comment on a pull request"""
    comment_id: int
    author: Optional[str]
    body: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Review:
    """Submitted pull request review"""
    review_id: int
    author: Optional[str]
    state: str
    submitted_at: Optional[datetime] = None


@dataclass(frozen=True)
class PendingReviewRequest:
    """A reviewer whose review is currently sought on a pull request"""
    pr_number: int
    reviewer: str
    requested_at: Optional[datetime] = None
