"""
Slack API Client

Posts messages through the Slack Web API (chat.postMessage).
"""

import logging
from typing import Dict, Optional, Protocol
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)


class SlackAPIError(Exception):
    """Slack API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class MessageSender(Protocol):
    """Anything that can post a text message to a Slack channel or user id."""

    def send_message(self, channel_id: str, text: str) -> None:
        ...


class SlackClient:
    """
    Slack Web API client.

    ``send_message`` either returns after Slack acknowledged the message
    or raises SlackAPIError.
    """

    def __init__(self, token: str, base_url: str = "https://slack.com/api", timeout: float = 30):
        """
        Initialize Slack client.

        Args:
            token: Slack bot or user token (xoxb-/xoxp-)
            base_url: Slack Web API base URL
            timeout: Per-request timeout in seconds
        """
        if not token:
            raise ValueError("Slack token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["POST"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Authorization': f'Bearer {self.token}',
            'Content-Type': 'application/json; charset=utf-8',
            'User-Agent': 'review-notifier/1.0'
        })

        return session

    def _call(self, method: str, payload: Dict) -> Dict:
        url = f"{self.base_url}/{method}"

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Slack request failed: {e}")
            raise SlackAPIError(f"could not post message: {e}") from e

        if not response.ok:
            raise SlackAPIError(
                f"could not post message: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SlackAPIError("could not post message: invalid JSON response",
                                status_code=response.status_code) from e

        if not data.get('ok'):
            error_code = data.get('error', 'unknown_error')
            raise SlackAPIError(
                f"could not post message: {error_code}",
                status_code=response.status_code,
                error_code=error_code,
            )

        return data

    def send_message(self, channel_id: str, text: str) -> None:
        """
        Post a message to a channel or user id.

        Raises:
            SlackAPIError: If Slack rejected the message or was unreachable
        """
        logger.info(f"Posting message to {channel_id}")
        self._call('chat.postMessage', {
            'channel': channel_id,
            'text': text,
            'as_user': True,
        })
