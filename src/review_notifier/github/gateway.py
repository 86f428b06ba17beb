"""
Repository Gateway

Typed façade over a pull request host, scoped to one owner/repository
pair. Host failures are wrapped into RepositoryError or PullRequestError
carrying the repository (and pull request number) they happened in.
"""

import logging
from typing import Dict, List, Optional, Protocol

from .client import GitHubAPIError
from .parser import GitHubPayloadParser
from ..models.pull_request import Comment, Event, EventKind, PullRequest, Review


logger = logging.getLogger(__name__)

# Transport failures plus malformed payloads caught while parsing
_HOST_ERRORS = (GitHubAPIError, AttributeError, KeyError, TypeError, ValueError)


class PullRequestHost(Protocol):
    """Minimal surface of the pull request host used by the gateway."""

    def list_pull_requests(self, owner: str, repo: str, state: str = "open") -> List[Dict]:
        ...

    def list_issue_comments(self, owner: str, repo: str, number: int) -> List[Dict]:
        ...

    def list_reviews(self, owner: str, repo: str, number: int) -> List[Dict]:
        ...

    def list_issue_events(self, owner: str, repo: str, number: int) -> List[Dict]:
        ...


class GatewayError(Exception):
    """Base class for repository gateway errors"""
    def __init__(self, message: str, owner: str, repository: str, cause: Optional[BaseException] = None):
        self.message = message
        self.owner = owner
        self.repository = repository
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        return f"{self.message} in {self.owner}/{self.repository}: {self.cause}"


class RepositoryError(GatewayError):
    """Repository scoped operation failed against the host"""


class PullRequestError(GatewayError):
    """Pull request scoped operation failed against the host"""
    def __init__(self, message: str, owner: str, repository: str, number: int,
                 cause: Optional[BaseException] = None):
        self.number = number
        super().__init__(message, owner, repository, cause)

    def _format(self) -> str:
        return f"{self.message} in {self.owner}/{self.repository}, number {self.number}: {self.cause}"


class RepositoryGateway:
    """
    Read-only access to one repository's pull requests.

    Every operation either returns the complete result or raises; nothing
    is cached and nothing is retried here.
    """

    def __init__(self, host: PullRequestHost, owner: str, repository: str,
                 parser: Optional[GitHubPayloadParser] = None):
        """
        Args:
            host: Pull request host, usually a GitHubClient
            owner: Repository owner
            repository: Repository name
            parser: Payload parser (default: GitHubPayloadParser)
        """
        if not owner or not repository:
            raise ValueError("Owner and repository are required")

        self.host = host
        self.owner = owner
        self.repository = repository
        self.parser = parser or GitHubPayloadParser()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repository}"

    def _pr_error(self, message: str, number: int, cause: BaseException) -> PullRequestError:
        error = PullRequestError(message, self.owner, self.repository, number, cause)
        logger.error(str(error))
        return error

    def list_open_pull_requests(self) -> List[PullRequest]:
        """
        List all open pull requests.

        Raises:
            RepositoryError: If the host call or payload parsing fails
        """
        try:
            pulls_data = self.host.list_pull_requests(self.owner, self.repository, state="open")
            return self.parser.parse_pull_requests(pulls_data)
        except _HOST_ERRORS as e:
            error = RepositoryError("error listing open pull requests", self.owner, self.repository, e)
            logger.error(str(error))
            raise error from e

    def list_issue_comments(self, number: int) -> List[Comment]:
        """
        List issue comments of a pull request.

        Raises:
            PullRequestError: If the host call or payload parsing fails
        """
        try:
            return self.parser.parse_comments(
                self.host.list_issue_comments(self.owner, self.repository, number)
            )
        except _HOST_ERRORS as e:
            raise self._pr_error("error listing issue comments", number, e) from e

    def list_pull_request_reviews(self, number: int) -> List[Review]:
        """
        List submitted reviews of a pull request.

        Raises:
            PullRequestError: If the host call or payload parsing fails
        """
        try:
            return self.parser.parse_reviews(
                self.host.list_reviews(self.owner, self.repository, number)
            )
        except _HOST_ERRORS as e:
            raise self._pr_error("error listing pull request reviews", number, e) from e

    def list_pull_request_events(self, number: int) -> List[Event]:
        """
        List the full, ordered issue event history of a pull request.

        Raises:
            PullRequestError: If the host call or payload parsing fails
        """
        try:
            return self.parser.parse_events(
                self.host.list_issue_events(self.owner, self.repository, number)
            )
        except _HOST_ERRORS as e:
            raise self._pr_error("error listing pull request events", number, e) from e

    def list_pull_request_review_requests(self, number: int) -> List[Event]:
        """
        List the review_requested events of a pull request.

        Failures surface as the events listing error.
        """
        events = self.list_pull_request_events(number)
        return [event for event in events if event.kind == EventKind.REVIEW_REQUESTED]
