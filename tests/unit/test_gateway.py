"""
Unit tests for the repository gateway.
"""

import pytest

from review_notifier.github.client import GitHubAPIError
from review_notifier.github.gateway import (
    GatewayError,
    PullRequestError,
    RepositoryError,
    RepositoryGateway,
)
from review_notifier.models.pull_request import EventKind

from helpers import OWNER, REPOSITORY, FakeHost, event_payload, pr_payload, review_payload


class TestRepositoryGateway:
    """Unit tests for RepositoryGateway class."""

    def setup_method(self):
        self.host = FakeHost()
        self.gateway = RepositoryGateway(self.host, OWNER, REPOSITORY)

    def test_gateway_initialization(self):
        assert self.gateway.owner == OWNER
        assert self.gateway.repository == REPOSITORY
        assert self.gateway.full_name == f"{OWNER}/{REPOSITORY}"

        with pytest.raises(ValueError):
            RepositoryGateway(self.host, "", REPOSITORY)

    def test_list_open_pull_requests(self):
        self.host.pulls = [pr_payload(1, reviewers=("bob",)), pr_payload(2)]

        pull_requests = self.gateway.list_open_pull_requests()

        assert [pr.number for pr in pull_requests] == [1, 2]
        assert pull_requests[0].reviewer_usernames == ("bob",)

    def test_list_open_pull_requests_error(self):
        cause = GitHubAPIError("test error")
        self.host.failures[('list_pull_requests', None)] = cause

        with pytest.raises(RepositoryError) as exc_info:
            self.gateway.list_open_pull_requests()

        error = exc_info.value
        assert error.message == "error listing open pull requests"
        assert error.cause is cause
        assert error.__cause__ is cause
        assert str(error) == f"error listing open pull requests in {OWNER}/{REPOSITORY}: test error"

    def test_list_open_pull_requests_malformed_payload(self):
        """A payload missing required keys never yields a partial result."""
        broken = pr_payload(2)
        del broken['user']
        self.host.pulls = [pr_payload(1), broken]

        with pytest.raises(RepositoryError) as exc_info:
            self.gateway.list_open_pull_requests()

        assert isinstance(exc_info.value.cause, KeyError)

    @pytest.mark.parametrize("method, host_method, message", [
        ('list_issue_comments', 'list_issue_comments', "error listing issue comments"),
        ('list_pull_request_reviews', 'list_reviews', "error listing pull request reviews"),
        ('list_pull_request_events', 'list_issue_events', "error listing pull request events"),
        ('list_pull_request_review_requests', 'list_issue_events', "error listing pull request events"),
    ])
    def test_pull_request_errors(self, method, host_method, message):
        self.host.failures[(host_method, 1)] = GitHubAPIError("test error")

        with pytest.raises(PullRequestError) as exc_info:
            getattr(self.gateway, method)(1)

        error = exc_info.value
        assert isinstance(error, GatewayError)
        assert error.number == 1
        assert error.message == message
        assert str(error) == f"{message} in {OWNER}/{REPOSITORY}, number 1: test error"

    def test_list_pull_request_events_keeps_order(self):
        self.host.events[3] = [
            event_payload(EventKind.REVIEW_REQUESTED, reviewer="bob", event_id=1),
            event_payload('commented', event_id=2),
            event_payload(EventKind.REVIEW_REQUESTED, reviewer="bob", event_id=3),
        ]

        events = self.gateway.list_pull_request_events(3)

        assert [e.event_id for e in events] == [1, 2, 3]

    def test_list_pull_request_review_requests(self):
        self.host.events[1] = [
            event_payload(EventKind.REVIEW_REQUESTED, reviewer="bob", event_id=1),
            event_payload('foo', event_id=2),
            event_payload(EventKind.REVIEW_REQUEST_REMOVED, reviewer="bob", event_id=3),
        ]

        review_requests = self.gateway.list_pull_request_review_requests(1)

        assert [e.event_id for e in review_requests] == [1]
        assert all(e.kind == "review_requested" for e in review_requests)

    def test_list_reviews_and_comments(self):
        self.host.reviews[1] = [review_payload('bob')]
        self.host.comments[1] = [{'id': 1, 'user': {'login': 'carol'}, 'body': 'ping'}]

        assert self.gateway.list_pull_request_reviews(1)[0].author == 'bob'
        assert self.gateway.list_issue_comments(1)[0].body == 'ping'
        assert ('list_reviews', 1) in self.host.calls
        assert ('list_issue_comments', 1) in self.host.calls

    @pytest.mark.parametrize("field, value", [
        ('actor', "alice"),
        ('requested_reviewer', ["bob"]),
        ('created_at', 1709287500),
    ])
    def test_list_pull_request_events_wrong_field_type(self, field, value):
        broken = event_payload(EventKind.REVIEW_REQUESTED, reviewer="bob", event_id=2)
        broken[field] = value
        self.host.events[1] = [event_payload(EventKind.REVIEW_REQUESTED, reviewer="carol"), broken]

        with pytest.raises(PullRequestError) as exc_info:
            self.gateway.list_pull_request_events(1)

        assert exc_info.value.number == 1
        assert isinstance(exc_info.value.cause, TypeError)

    def test_list_open_pull_requests_non_object_entry(self):
        self.host.pulls = [pr_payload(1), "not a pull request"]

        with pytest.raises(RepositoryError) as exc_info:
            self.gateway.list_open_pull_requests()

        assert isinstance(exc_info.value.cause, AttributeError)
