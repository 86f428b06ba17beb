"""
End-to-end tests for a notification cycle.

GitHub and Slack are both mocked at the requests session level;
everything between them runs for real.
"""

from unittest.mock import Mock, patch

from review_notifier.github.client import GitHubClient
from review_notifier.github.gateway import RepositoryGateway
from review_notifier.models.pull_request import EventKind
from review_notifier.notifier import Notifier
from review_notifier.slack.client import SlackClient
from review_notifier.slack.directory import IdentityDirectory

from helpers import OWNER, REPOSITORY, encode_users, event_payload, pr_payload


BASE = f"https://api.github.com/repos/{OWNER}/{REPOSITORY}"


def make_response(payload, status_code=200):
    response = Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.json.return_value = payload
    response.content = b'{}'
    response.headers = {}
    return response


class TestNotificationCycle:

    def setup_method(self):
        self.github_routes = {}
        self.slack_results = {}
        self.posted = []

    def github_request(self, method, url, params=None, **kwargs):
        route = self.github_routes.get(url)
        if isinstance(route, int):
            return make_response({'message': 'Server Error'}, status_code=route)
        if params and params.get('page', 1) > 1:
            return make_response([])
        return make_response(route or [])

    def slack_post(self, url, json=None, **kwargs):
        self.posted.append((url, json))
        return make_response(self.slack_results.get(json['channel'], {'ok': True}))

    def make_notifier(self, users):
        return Notifier(
            RepositoryGateway(GitHubClient(), OWNER, REPOSITORY),
            IdentityDirectory.load(encode_users(users)),
            SlackClient("xoxb-test"),
        )

    @patch('requests.Session.post')
    @patch('requests.Session.request')
    def test_single_pull_request_scenario(self, mock_request, mock_post):
        """#42 requests bob and carol; only bob has a Slack identity."""
        self.github_routes = {
            f"{BASE}/pulls": [pr_payload(42, author="alice", title="Add retries")],
            f"{BASE}/issues/42/events": [
                event_payload(EventKind.REVIEW_REQUESTED, reviewer="bob", event_id=1),
                event_payload('commented', event_id=2),
                event_payload(EventKind.REVIEW_REQUESTED, reviewer="carol", event_id=3),
            ],
        }
        mock_request.side_effect = self.github_request
        mock_post.side_effect = self.slack_post

        report = self.make_notifier([{"username": "bob", "id": "U1"}]).run_cycle()

        assert report.processed_pull_requests == [42]
        assert [(o.reviewer, o.slack_id) for o in report.sent] == [("bob", "U1")]
        assert [o.reviewer for o in report.unresolved] == ["carol"]
        assert report.errors == []

        assert len(self.posted) == 1
        url, body = self.posted[0]
        assert url == "https://slack.com/api/chat.postMessage"
        assert body['channel'] == "U1"
        assert "#42" in body['text']
        assert "Add retries" in body['text']

    @patch('requests.Session.post')
    @patch('requests.Session.request')
    def test_partial_failures(self, mock_request, mock_post):
        """An events failure on #1 and a Slack rejection on #2 leave #3 untouched."""
        self.github_routes = {
            f"{BASE}/pulls": [pr_payload(1), pr_payload(2), pr_payload(3)],
            f"{BASE}/issues/1/events": 502,
            f"{BASE}/issues/2/events": [event_payload(EventKind.REVIEW_REQUESTED, reviewer="bob")],
            f"{BASE}/issues/3/events": [event_payload(EventKind.REVIEW_REQUESTED, reviewer="carol")],
        }
        self.slack_results = {"U1": {'ok': False, 'error': 'account_inactive'}}
        mock_request.side_effect = self.github_request
        mock_post.side_effect = self.slack_post

        report = self.make_notifier([
            {"username": "bob", "id": "U1"},
            {"username": "carol", "id": "U2"},
        ]).run_cycle()

        assert [e.number for e in report.errors] == [1]
        assert report.processed_pull_requests == [2, 3]
        assert [o.reviewer for o in report.failed] == ["bob"]
        assert report.failed[0].error.cause.error_code == "account_inactive"
        assert [o.reviewer for o in report.sent] == ["carol"]
        assert report.has_errors

    @patch('requests.Session.post')
    @patch('requests.Session.request')
    def test_repository_failure(self, mock_request, mock_post):
        self.github_routes = {f"{BASE}/pulls": 503}
        mock_request.side_effect = self.github_request

        report = self.make_notifier([{"username": "bob", "id": "U1"}]).run_cycle()

        assert report.processed_pull_requests == []
        assert len(report.errors) == 1
        assert "error listing open pull requests" in str(report.errors[0])
        mock_post.assert_not_called()
