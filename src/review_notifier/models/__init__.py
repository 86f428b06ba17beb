"""
Data Models

Review notifier 핵심 데이터 모델들
"""

from .pull_request import (
    Assignee,
    Comment,
    Event,
    EventKind,
    PendingReviewRequest,
    PullRequest,
    Review,
)
from .directory import DirectoryEntry, DirectoryEntryRecord
from .report import CycleReport, NotificationOutcome, OutcomeStatus

__all__ = [
    "Assignee",
    "Comment",
    "Event",
    "EventKind",
    "PendingReviewRequest",
    "PullRequest",
    "Review",
    "DirectoryEntry",
    "DirectoryEntryRecord",
    "CycleReport",
    "NotificationOutcome",
    "OutcomeStatus",
]
