"""Tests for the GitHub webhook endpoint."""

import pytest
from fastapi import BackgroundTasks
from fastapi.testclient import TestClient

from src.core.exceptions import UpstreamError
from src.main import create_app
from src.services.github.service import GithubWebhookService
from tests.conftest import (
    encode,
    make_commit,
    make_pr_payload,
    make_push_payload,
    make_settings,
    sign,
)

URL = "/webhooks/github"


def _post(client: TestClient, body: bytes, event: str | None, signature: str | None = "auto"):
    headers = {"X-GitHub-Delivery": "delivery-1", "Content-Type": "application/json"}
    if event is not None:
        headers["X-GitHub-Event"] = event
    if signature == "auto":
        headers["X-Hub-Signature-256"] = sign(body)
    elif signature is not None:
        headers["X-Hub-Signature-256"] = signature
    return client.post(URL, content=body, headers=headers)


@pytest.fixture
def client(settings, review_service):
    return TestClient(create_app(settings=settings, review_service=review_service))


def _assert_no_outbound(github, reviewer, *notifiers):
    github.get_commit_diff.assert_not_awaited()
    github.get_pull_request_diff.assert_not_awaited()
    github.submit_review.assert_not_awaited()
    reviewer.analyze_diff.assert_not_awaited()
    for notifier in notifiers:
        notifier.send.assert_not_awaited()


class TestAuthentication:
    """Signature checks happen before anything else."""

    def test_missing_signature(self, client, github, reviewer):
        response = _post(client, encode(make_push_payload([make_commit("c1")])), "push", signature=None)

        assert response.status_code == 401
        assert "error" in response.json()
        _assert_no_outbound(github, reviewer)

    def test_bad_signature(self, client, github, reviewer):
        response = _post(client, b"{}", "push", signature="sha256=" + "0" * 64)

        assert response.status_code == 401
        _assert_no_outbound(github, reviewer)

    def test_bad_signature_on_malformed_json(self, client):
        response = _post(client, b"{not json", "push", signature="sha256=abc")

        assert response.status_code == 401


class TestPayloadValidation:
    """Parse and schema errors become 400 responses."""

    def test_malformed_json(self, client, github, reviewer, teams):
        response = _post(client, b"{not json", "push")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON"
        _assert_no_outbound(github, reviewer, teams)

    def test_schema_failure_push(self, client, github, reviewer, teams):
        response = _post(client, encode({"ref": "refs/heads/main"}), "push")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid Payload"
        fields = {tuple(e["loc"]) for e in body["details"]["errors"]}
        assert ("repository",) in fields
        assert ("commits",) in fields
        _assert_no_outbound(github, reviewer, teams)

    def test_schema_failure_pull_request(self, client, github, reviewer):
        payload = make_pr_payload()
        del payload["pull_request"]["html_url"]

        response = _post(client, encode(payload), "pull_request")

        assert response.status_code == 400
        assert response.json()["details"]["errors"]
        _assert_no_outbound(github, reviewer)

    def test_non_object_body(self, client):
        response = _post(client, b"[1, 2, 3]", "pull_request")

        assert response.status_code == 400


class TestDispatch:
    """Event-type routing."""

    def test_unknown_event_ignored(self, client, github, reviewer, teams):
        response = _post(client, encode({"hello": "world"}), "issues")

        assert response.status_code == 200
        assert response.json()["message"] == "Event issues not handled"
        _assert_no_outbound(github, reviewer, teams)

    def test_missing_event_header(self, client, github, reviewer, teams):
        response = _post(client, encode({"hello": "world"}), None)

        assert response.status_code == 200
        assert response.json() == {"message": "No event type provided", "delivery": "delivery-1"}
        _assert_no_outbound(github, reviewer, teams)

    def test_ping(self, client):
        response = _post(client, encode({"zen": "Design for failure."}), "ping")

        assert response.status_code == 200
        assert response.json()["message"] == "pong"

    def test_push_disabled(self, github, reviewer, review_service):
        app = create_app(settings=make_settings(github_push_review_enabled=False), review_service=review_service)
        client = TestClient(app)

        response = _post(client, encode(make_push_payload([make_commit("c1")])), "push")

        assert response.status_code == 200
        assert response.json()["message"] == "Push review disabled"
        _assert_no_outbound(github, reviewer)

    def test_unsupported_pr_action_ignored(self, client, github, reviewer):
        response = _post(client, encode(make_pr_payload(action="closed")), "pull_request")

        assert response.status_code == 200
        assert response.json()["message"] == "Action closed not reviewed"
        _assert_no_outbound(github, reviewer)

    @pytest.mark.parametrize("action", ["opened", "synchronize", "reopened"])
    def test_pr_actions_reviewed(self, client, github, action):
        response = _post(client, encode(make_pr_payload(action=action)), "pull_request")

        assert response.status_code == 200
        assert response.json()["message"] == "Review started"
        github.get_pull_request_diff.assert_awaited_once()


class TestScenarios:
    """End-to-end flows through the HTTP surface."""

    def test_push_with_failing_first_commit(self, client, github, reviewer, teams, slack, email):
        async def diff_for(owner, repo, sha):
            if sha == "aaa":
                raise UpstreamError("Not Found", status=404)
            return "diff --git a/x b/x"

        github.get_commit_diff.side_effect = diff_for

        response = _post(client, encode(make_push_payload([make_commit("aaa"), make_commit("bbb")])), "push")

        assert response.status_code == 200
        assert response.json() == {
            "message": "Review started",
            "event": "push",
            "delivery": "delivery-1",
            "target": "acme/widgets@bbb",
        }
        assert github.get_commit_diff.await_count == 2
        reviewer.analyze_diff.assert_awaited_once()
        teams.send.assert_awaited_once()
        slack.send.assert_awaited_once()
        email.send.assert_awaited_once()

    def test_pull_request_critical(self, client, github, reviewer, teams, slack, critical_review):
        reviewer.analyze_diff.return_value = critical_review

        response = _post(client, encode(make_pr_payload()), "pull_request")

        assert response.status_code == 200
        kwargs = github.submit_review.await_args.kwargs
        assert kwargs["event"] == "REQUEST_CHANGES"
        assert [c.line for c in kwargs["comments"]] == [14]
        assert teams.send.await_args.args[0] is critical_review
        assert slack.send.await_args.args[0] is critical_review

    def test_background_failure_does_not_reach_caller(self, client, review_service, monkeypatch):
        async def explode(event):
            raise RuntimeError("pipeline bug")

        monkeypatch.setattr(review_service, "process_push_event", explode)

        response = _post(client, encode(make_push_payload([make_commit("c1")])), "push")

        assert response.status_code == 200


class TestResponseBeforeReview:
    """The response is produced before the review runs."""

    async def test_handle_webhook_returns_before_pipeline(self, settings, review_service, github, teams):
        service = GithubWebhookService(settings=settings, review_service=review_service)
        background = BackgroundTasks()
        body = encode(make_push_payload([make_commit("c1"), make_commit("c2")]))

        response = await service.handle_webhook(sign(body), body, "push", background)

        assert response.message == "Review started"
        github.get_commit_diff.assert_not_awaited()
        teams.send.assert_not_awaited()

        await background()

        assert github.get_commit_diff.await_count == 2
        assert teams.send.await_count == 2


class TestUnexpectedErrors:
    """Synchronous surprises become 500 responses."""

    def test_internal_error(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("dispatch bug")

        service = client.app.state.webhook_service
        monkeypatch.setattr(service, "_handle_push", broken)

        response = _post(client, encode(make_push_payload([make_commit("c1")])), "push")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal Server Error"
        assert body["details"]["message"] == "dispatch bug"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"
