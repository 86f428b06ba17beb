"""
Review Request Resolver

Reduces a pull request's issue event history to its pending review
requests. Pure functions, no I/O.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence
from datetime import datetime

from ..models.pull_request import Event, EventKind, PendingReviewRequest, Review


logger = logging.getLogger(__name__)

# Reviews in this state are drafts and have not been submitted yet
_DRAFT_REVIEW_STATE = "PENDING"


def resolve_pending(events: Iterable[Event]) -> List[Event]:
    """
    Return every review_requested event, in original order.

    Duplicates are kept: a reviewer requested twice yields two entries.
    Later submissions or withdrawals are not taken into account; see
    :func:`resolve_outstanding` for the reconciled view.
    """
    return [event for event in events if event.kind == EventKind.REVIEW_REQUESTED]


def to_pending_requests(pr_number: int, events: Iterable[Event]) -> List[PendingReviewRequest]:
    """Map review_requested events to PendingReviewRequest values.

    Team requests carry no reviewer login and are skipped.
    """
    return [
        PendingReviewRequest(
            pr_number=pr_number,
            reviewer=event.requested_reviewer,
            requested_at=event.created_at,
        )
        for event in resolve_pending(events)
        if event.requested_reviewer
    ]


def _is_satisfied(requested_at: Optional[datetime], reviews: Sequence[Review]) -> bool:
    for review in reviews:
        if review.state == _DRAFT_REVIEW_STATE:
            continue
        # Without a request time any submitted review counts
        if requested_at is None or review.submitted_at is None:
            return True
        if review.submitted_at >= requested_at:
            return True
    return False


def resolve_outstanding(
    pr_number: int,
    events: Iterable[Event],
    reviews: Iterable[Review] = (),
) -> List[PendingReviewRequest]:
    """
    Return review requests that are still outstanding.

    Walks the history in order, keeping the latest request per reviewer.
    A review_request_removed event withdraws the request; a review by the
    reviewer submitted at or after the request satisfies it. The result
    holds one entry per reviewer, ordered by their latest request.

    Args:
        pr_number: Pull request the events belong to
        events: Chronological issue events
        reviews: Submitted reviews of the pull request

    Returns:
        Outstanding review requests
    """
    active: Dict[str, Optional[datetime]] = {}

    for event in events:
        reviewer = event.requested_reviewer
        if not reviewer:
            continue
        if event.kind == EventKind.REVIEW_REQUESTED:
            # Re-insert so ordering follows the latest request
            active.pop(reviewer, None)
            active[reviewer] = event.created_at
        elif event.kind == EventKind.REVIEW_REQUEST_REMOVED:
            active.pop(reviewer, None)

    reviews_by_author: Dict[str, List[Review]] = {}
    for review in reviews:
        if review.author:
            reviews_by_author.setdefault(review.author, []).append(review)

    outstanding = []
    for reviewer, requested_at in active.items():
        if _is_satisfied(requested_at, reviews_by_author.get(reviewer, [])):
            logger.debug(f"Review request for {reviewer} on #{pr_number} already satisfied")
            continue
        outstanding.append(PendingReviewRequest(
            pr_number=pr_number,
            reviewer=reviewer,
            requested_at=requested_at,
        ))

    return outstanding
