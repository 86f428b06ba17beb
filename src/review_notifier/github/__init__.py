"""
GitHub Integration Layer

This module provides GitHub API access for open pull requests,
their issue events, comments and reviews.
"""

from .client import GitHubAPIError, GitHubClient, RateLimitExceeded
from .gateway import (
    GatewayError,
    PullRequestError,
    PullRequestHost,
    RepositoryError,
    RepositoryGateway,
)
from .parser import GitHubPayloadParser

__all__ = [
    'GitHubAPIError',
    'GitHubClient',
    'RateLimitExceeded',
    'GatewayError',
    'PullRequestError',
    'PullRequestHost',
    'RepositoryError',
    'RepositoryGateway',
    'GitHubPayloadParser',
]
