"""Shared fixtures."""

import hashlib
import hmac
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config import Settings
from src.schemas.review import StructuredReview
from src.services.notifications import NotifierSet
from src.services.reviewer.service import ReviewService

WEBHOOK_SECRET = "It's a Secret to Everybody"


def make_settings(**overrides) -> Settings:
    values = {
        "github_token": "ghp_test",
        "github_webhook_secret": WEBHOOK_SECRET,
        "openai_api_key": "sk-test",
        "environment": "test",
        "debug": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def make_commit(sha: str, email: str | None = "dev@example.com", name: str = "Dev") -> dict:
    author = {"name": name, "username": "dev"}
    if email is not None:
        author["email"] = email
    return {
        "id": sha,
        "tree_id": "t" * 40,
        "distinct": True,
        "message": f"commit {sha}",
        "timestamp": "2024-05-01T12:30:00Z",
        "url": f"https://github.com/acme/widgets/commit/{sha}",
        "author": author,
        "committer": author,
        "added": [],
        "removed": [],
        "modified": ["app.py"],
    }


def make_push_payload(commits: list[dict]) -> dict:
    return {
        "ref": "refs/heads/main",
        "before": "0" * 40,
        "after": commits[-1]["id"] if commits else "1" * 40,
        "repository": {
            "id": 1,
            "name": "widgets",
            "full_name": "acme/widgets",
            "owner": {"login": "acme", "name": "acme", "id": 7},
        },
        "pusher": {"name": "dev", "email": "dev@example.com"},
        "sender": {"login": "dev", "id": 9},
        "commits": commits,
        "head_commit": commits[-1] if commits else None,
    }


def make_pr_payload(action: str = "opened", number: int = 42) -> dict:
    ref = {"ref": "feature", "sha": "a" * 40}
    return {
        "action": action,
        "number": number,
        "pull_request": {
            "number": number,
            "title": "Add widgets",
            "body": None,
            "user": {"login": "octocat", "id": 1},
            "head": ref,
            "base": {"ref": "main", "sha": "b" * 40},
            "html_url": f"https://github.com/acme/widgets/pull/{number}",
        },
        "repository": {
            "id": 1,
            "name": "widgets",
            "full_name": "acme/widgets",
            "owner": {"login": "acme", "id": 7},
        },
        "sender": {"login": "octocat", "id": 1},
    }


def encode(payload) -> bytes:
    return json.dumps(payload).encode()


def make_notifier(name: str) -> MagicMock:
    notifier = MagicMock()
    notifier.name = name
    notifier.send = AsyncMock()
    return notifier


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def clean_review() -> StructuredReview:
    return StructuredReview(summary="Looks good.", overall_severity="clean", findings=[])


@pytest.fixture
def critical_review() -> StructuredReview:
    return StructuredReview.model_validate(
        {
            "summary": "SQL injection in the query builder.",
            "overall_severity": "critical",
            "findings": [
                {
                    "severity": "critical",
                    "file_path": "app/db.py",
                    "line_range": {"start": 10, "end": 14},
                    "title": "SQL injection",
                    "description": "User input is concatenated into SQL.",
                    "suggestion": "Use bound parameters.",
                    "code_suggestion": "cursor.execute(sql, (user_id,))",
                }
            ],
        }
    )


@pytest.fixture
def github():
    client = MagicMock()
    client.get_commit_diff = AsyncMock(return_value="diff --git a/app.py b/app.py")
    client.get_pull_request_diff = AsyncMock(return_value="diff --git a/app.py b/app.py")
    client.submit_review = AsyncMock()
    return client


@pytest.fixture
def reviewer(clean_review):
    ai = MagicMock()
    ai.analyze_diff = AsyncMock(return_value=clean_review)
    return ai


@pytest.fixture
def teams():
    return make_notifier("teams")


@pytest.fixture
def slack():
    return make_notifier("slack")


@pytest.fixture
def email():
    return make_notifier("email")


@pytest.fixture
def review_service(settings, github, reviewer, teams, slack, email) -> ReviewService:
    return ReviewService(
        settings=settings,
        github=github,
        reviewer=reviewer,
        notifiers=NotifierSet(broadcast=[teams, slack], email=email),
    )
