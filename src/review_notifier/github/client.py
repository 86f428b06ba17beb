"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides paginated listings of pull requests, issue comments,
reviews and issue events.
"""

import time
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with optional authentication, rate limiting, and error handling.

    Implements the ``PullRequestHost`` capability used by
    :class:`~review_notifier.github.gateway.RepositoryGateway`.
    Without a token all calls are made unauthenticated.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = "https://api.github.com",
        timeout: float = 30,
        per_page: int = 100,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token, or None for anonymous access
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Per-request timeout in seconds
            per_page: Page size used for list endpoints (max 100)
        """
        if not 1 <= per_page <= 100:
            raise ValueError("per_page must be between 1 and 100")

        self.token = token or None
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.per_page = per_page
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'review-notifier/1.0'
        })
        if self.token:
            session.headers['Authorization'] = f'token {self.token}'

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= 0 and datetime.now() < self.rate_limit_reset:
            logger.warning(f"Rate limit exhausted, resets at {self.rate_limit_reset}")
            raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make request to GitHub API with rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}") from e

        self._update_rate_limit(response)

        if response.status_code == 429 or (
            response.status_code == 403 and self.rate_limit_remaining == 0
        ):
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def _paginate(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        """Collect every page of a list endpoint."""
        items: List[Dict] = []
        page = 1

        while True:
            response = self._make_request(
                'GET',
                endpoint,
                params={**(params or {}), 'page': page, 'per_page': self.per_page}
            )

            page_items = response.json()
            if not page_items:
                break

            items.extend(page_items)

            if len(page_items) < self.per_page:
                break

            page += 1

        return items

    def list_pull_requests(self, owner: str, repo: str, state: str = "open") -> List[Dict]:
        """
        List pull requests of a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            state: 'open', 'closed' or 'all'

        Returns:
            List of pull request data
        """
        logger.info(f"Fetching {state} PRs for {owner}/{repo}")

        pulls = self._paginate(f'/repos/{owner}/{repo}/pulls', params={'state': state})
        logger.info(f"Found {len(pulls)} {state} pull requests")
        return pulls

    def list_issue_comments(self, owner: str, repo: str, number: int) -> List[Dict]:
        """List issue comments of a pull request."""
        logger.info(f"Fetching issue comments for {owner}/{repo}#{number}")
        return self._paginate(f'/repos/{owner}/{repo}/issues/{number}/comments')

    def list_reviews(self, owner: str, repo: str, number: int) -> List[Dict]:
        """List submitted reviews of a pull request."""
        logger.info(f"Fetching reviews for {owner}/{repo}#{number}")
        return self._paginate(f'/repos/{owner}/{repo}/pulls/{number}/reviews')

    def list_issue_events(self, owner: str, repo: str, number: int) -> List[Dict]:
        """
        List the issue event history of a pull request.

        Events are returned in chronological order as GitHub sends them.
        """
        logger.info(f"Fetching issue events for {owner}/{repo}#{number}")
        return self._paginate(f'/repos/{owner}/{repo}/issues/{number}/events')
