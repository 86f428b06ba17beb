"""
Review Request Notifier

Orchestrates one notification cycle: open pull requests are read from
the repository gateway, their event history is reduced to pending
review requests, and each requested reviewer is messaged on Slack.
"""

import logging
from typing import List, Optional

from .github.gateway import PullRequestError, RepositoryError, RepositoryGateway
from .models.pull_request import PendingReviewRequest, PullRequest
from .models.report import CycleReport, NotificationOutcome, OutcomeStatus
from .review.resolver import resolve_outstanding, to_pending_requests
from .slack.client import MessageSender
from .slack.directory import IdentityDirectory


logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_TEMPLATE = (
    "Hi {reviewer}! {author} requested your review on "
    "{owner}/{repository}#{number}: {title}\n{url}"
)

_TEMPLATE_FIELDS = {
    'number': 1,
    'title': '',
    'url': '',
    'owner': '',
    'repository': '',
    'reviewer': '',
    'author': '',
}


class DeliveryError(Exception):
    """A notification could not be delivered to its reviewer"""
    IDENTITY_NOT_FOUND = "identity not found"

    def __init__(self, message: str, reviewer: str, pr_number: int,
                 slack_id: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(f"{message} for '{reviewer}' on #{pr_number}")
        self.message = message
        self.reviewer = reviewer
        self.pr_number = pr_number
        self.slack_id = slack_id
        self.cause = cause


class Notifier:
    """
    Review request notifier.

    ``run_cycle`` always completes: repository, pull request and delivery
    failures are collected into the returned CycleReport. A failure for
    one pull request or one reviewer never stops the others.
    """

    def __init__(
        self,
        gateway: RepositoryGateway,
        directory: IdentityDirectory,
        sender: MessageSender,
        message_template: str = DEFAULT_MESSAGE_TEMPLATE,
        reconcile_reviews: bool = False,
    ):
        """
        Initialize notifier.

        Args:
            gateway: Repository gateway for the watched repository
            directory: GitHub → Slack identity directory
            sender: Slack message sender
            message_template: str.format template for the message body
            reconcile_reviews: Drop requests that were withdrawn or already
                answered with a review instead of reporting every
                review_requested event
        """
        validate_template(message_template)

        self.gateway = gateway
        self.directory = directory
        self.sender = sender
        self.message_template = message_template
        self.reconcile_reviews = reconcile_reviews

    def render_message(self, pull_request: PullRequest, request: PendingReviewRequest) -> str:
        return self.message_template.format(
            number=pull_request.number,
            title=pull_request.title,
            url=pull_request.html_url,
            owner=self.gateway.owner,
            repository=self.gateway.repository,
            reviewer=request.reviewer,
            author=pull_request.owner.username,
        )

    def pending_requests(self, pull_request: PullRequest) -> List[PendingReviewRequest]:
        """
        Resolve the pending review requests of one pull request.

        Raises:
            PullRequestError: If events (or reviews) cannot be listed
        """
        events = self.gateway.list_pull_request_events(pull_request.number)

        if self.reconcile_reviews:
            reviews = self.gateway.list_pull_request_reviews(pull_request.number)
            return resolve_outstanding(pull_request.number, events, reviews)

        return to_pending_requests(pull_request.number, events)

    def notify(self, pull_request: PullRequest, request: PendingReviewRequest) -> NotificationOutcome:
        """
        Deliver one notification and describe what happened.

        Any exception raised by the sender is recorded as a FAILED outcome.
        """
        slack_id = self.directory.resolve(request.reviewer)

        if slack_id is None:
            logger.warning(f"No Slack identity for {request.reviewer}, skipping #{request.pr_number}")
            return NotificationOutcome(
                request=request,
                status=OutcomeStatus.UNRESOLVED_IDENTITY,
                error=DeliveryError(DeliveryError.IDENTITY_NOT_FOUND, request.reviewer, request.pr_number),
            )

        try:
            self.sender.send_message(slack_id, self.render_message(pull_request, request))
        except Exception as e:
            error = DeliveryError("could not deliver message", request.reviewer,
                                  request.pr_number, slack_id=slack_id, cause=e)
            logger.error(f"{error}: {e}")
            return NotificationOutcome(request=request, status=OutcomeStatus.FAILED,
                                       slack_id=slack_id, error=error)

        logger.info(f"Notified {request.reviewer} ({slack_id}) about #{request.pr_number}")
        return NotificationOutcome(request=request, status=OutcomeStatus.SENT, slack_id=slack_id)

    def run_cycle(self) -> CycleReport:
        """
        Run one notification cycle over all open pull requests.

        Returns:
            CycleReport with every outcome and error of the cycle
        """
        report = CycleReport(repository=self.gateway.full_name)
        logger.info(f"Starting notification cycle for {report.repository}")

        try:
            pull_requests = self.gateway.list_open_pull_requests()
        except RepositoryError as e:
            report.errors.append(e)
            logger.error(f"Notification cycle aborted: {e}")
            return report.finish()

        for pull_request in pull_requests:
            try:
                pending = self.pending_requests(pull_request)
            except PullRequestError as e:
                report.errors.append(e)
                continue

            report.processed_pull_requests.append(pull_request.number)
            for request in pending:
                report.outcomes.append(self.notify(pull_request, request))

        report.finish()
        logger.info(f"Notification cycle finished: {report.summary()}")
        return report


def validate_template(template: str) -> None:
    """Raise ValueError when the template uses unknown fields."""
    try:
        template.format(**_TEMPLATE_FIELDS)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid message template: {e}") from e
