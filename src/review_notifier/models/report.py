"""
Cycle Report Data Models

Outcome of one notification cycle over all open pull requests.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from .pull_request import PendingReviewRequest


class OutcomeStatus(str, Enum):
    """Result of one notification attempt"""
    SENT = "sent"
    UNRESOLVED_IDENTITY = "unresolved_identity"
    FAILED = "failed"


@dataclass
class NotificationOutcome:
    """Outcome of notifying one reviewer about one pull request"""
    request: PendingReviewRequest
    status: OutcomeStatus
    slack_id: Optional[str] = None
    error: Optional[Exception] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.status == OutcomeStatus.SENT and not self.slack_id:
            raise ValueError("Sent outcome requires a slack_id")
        if self.status != OutcomeStatus.SENT and self.error is None:
            raise ValueError(f"Outcome '{self.status.value}' requires an error")

    @property
    def reviewer(self) -> str:
        return self.request.reviewer

    @property
    def pr_number(self) -> int:
        return self.request.pr_number


@dataclass
class CycleReport:
    """
    Aggregated result of one notification cycle.

    Repository and pull request level failures are kept in ``errors``;
    per-reviewer results are kept in ``outcomes``.
    """
    repository: str
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    processed_pull_requests: List[int] = field(default_factory=list)
    outcomes: List[NotificationOutcome] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)

    def __post_init__(self):
        """데이터 검증"""
        if '/' not in self.repository:
            raise ValueError("Repository must be in format 'owner/repo'")

    def _with_status(self, status: OutcomeStatus) -> List[NotificationOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def sent(self) -> List[NotificationOutcome]:
        return self._with_status(OutcomeStatus.SENT)

    @property
    def unresolved(self) -> List[NotificationOutcome]:
        return self._with_status(OutcomeStatus.UNRESOLVED_IDENTITY)

    @property
    def failed(self) -> List[NotificationOutcome]:
        return self._with_status(OutcomeStatus.FAILED)

    @property
    def has_errors(self) -> bool:
        """True when any pull request or delivery failed"""
        return bool(self.errors) or bool(self.failed)

    @property
    def processing_time(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def finish(self) -> "CycleReport":
        self.finished_at = datetime.now()
        return self

    def summary(self) -> Dict[str, object]:
        """리포트 요약을 딕셔너리로 변환"""
        return {
            'repository': self.repository,
            'processed_pull_requests': len(self.processed_pull_requests),
            'sent': len(self.sent),
            'unresolved_identity': len(self.unresolved),
            'failed': len(self.failed),
            'errors': len(self.errors),
            'processing_time': round(self.processing_time, 3),
        }
