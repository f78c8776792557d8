"""Pydantic schemas for GitHub webhook payloads and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SUPPORTED_PR_ACTIONS = ("opened", "synchronize", "reopened")


class GithubModel(BaseModel):
    """Webhook payloads carry far more fields than we read."""

    model_config = ConfigDict(extra="ignore")


class GithubUser(GithubModel):
    login: str
    id: int | None = None


class RepositoryOwner(GithubModel):
    login: str
    name: str | None = None
    id: int | None = None


class Repository(GithubModel):
    id: int | None = None
    name: str
    full_name: str
    owner: RepositoryOwner
    html_url: str | None = None


class CommitAuthor(GithubModel):
    name: str
    email: str | None = None
    username: str | None = None


class Commit(GithubModel):
    id: str
    message: str
    timestamp: str
    url: str
    author: CommitAuthor
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)


class Pusher(GithubModel):
    name: str
    email: str | None = None


class PushEvent(GithubModel):
    """Payload of a ``push`` event."""

    ref: str
    before: str
    after: str
    repository: Repository
    pusher: Pusher
    sender: GithubUser
    commits: list[Commit]
    head_commit: Commit | None = None


class PullRequestRef(GithubModel):
    ref: str
    sha: str


class PullRequest(GithubModel):
    number: int
    title: str
    body: str | None = None
    user: GithubUser
    head: PullRequestRef
    base: PullRequestRef
    html_url: str


class PullRequestEvent(GithubModel):
    """Payload of a reviewable ``pull_request`` event."""

    action: Literal["opened", "synchronize", "reopened"]
    number: int
    pull_request: PullRequest
    repository: Repository
    sender: GithubUser


class WebhookResponse(BaseModel):
    """Response schema for webhook events."""

    message: str
    event: str | None = None
    delivery: str | None = None
    target: str | None = None
