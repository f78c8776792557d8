"""Reviewer service - orchestration layer."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from src.config import Settings
from src.core.logging import get_logger
from src.schemas.review import StructuredReview
from src.services.github.client import GithubClient
from src.services.github.schemas import Commit, PullRequestEvent, PushEvent, Repository
from src.services.notifications import CommitMetadata, NotifierSet
from src.services.reviewer.analyzer import AiReviewer
from src.services.reviewer.mapper import findings_to_comments, severity_to_decision

logger = get_logger("reviewer.service")

DATE_FORMAT = "%b %d, %Y %H:%M %Z"


def format_date(value: Optional[str] = None) -> str:
    """Human-readable date for notifications; ``None`` means now."""
    if value is None:
        return datetime.now(timezone.utc).strftime(DATE_FORMAT)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime(DATE_FORMAT).strip()
    except ValueError:
        return value


def is_deliverable_email(email: Optional[str]) -> bool:
    return isinstance(email, str) and "@" in email


class ReviewService:
    """Runs fetch -> analyze -> submit -> notify for commits and pull requests.

    Every step failure is contained to its unit (or its step) and logged.
    """

    def __init__(
        self,
        settings: Settings,
        github: GithubClient,
        reviewer: AiReviewer,
        notifiers: NotifierSet,
    ) -> None:
        self._settings = settings
        self._github = github
        self._reviewer = reviewer
        self._notifiers = notifiers

    async def process_push_event(self, event: PushEvent) -> None:
        repository = event.repository
        commits = event.commits

        if not commits:
            logger.info(f"No commits found in push event for {repository.full_name}")
            return

        limit = self._settings.push_review_concurrency
        logger.info(
            f"Starting review of {len(commits)} commit(s) in {repository.full_name} "
            f"(concurrency={limit})"
        )

        if limit <= 1:
            # One commit at a time, in push order, to stay gentle on the AI and GitHub APIs
            for commit in commits:
                await self.process_commit(repository, commit)
        else:
            semaphore = asyncio.Semaphore(limit)

            async def bounded(commit: Commit) -> None:
                async with semaphore:
                    await self.process_commit(repository, commit)

            results = await asyncio.gather(*(bounded(c) for c in commits), return_exceptions=True)
            for commit, result in zip(commits, results):
                if isinstance(result, Exception):
                    logger.opt(exception=result).error(f"Review of commit {commit.id} failed: {result}")

        logger.info(f"Finished processing push event for {repository.full_name}")

    async def process_commit(self, repository: Repository, commit: Commit) -> None:
        logger.info(f"Processing commit {commit.id} by {commit.author.name}")
        owner = repository.owner.name or repository.owner.login

        try:
            diff = await self._github.get_commit_diff(owner, repository.name, commit.id)
        except Exception as e:
            logger.error(f"Skipping commit {commit.id}: failed to fetch diff: {e}")
            return

        if not diff:
            logger.warning(f"Skipping commit {commit.id}: empty diff")
            return

        review = await self._analyze(diff, f"commit {commit.id}")
        if review is None:
            return

        metadata = CommitMetadata(
            repo=repository.full_name or repository.name,
            author=commit.author.name or commit.author.username or "Unknown",
            date=format_date(commit.timestamp),
            url=commit.url,
        )
        await self.notify(review, metadata, commit.author.email)

    async def process_pull_request_event(self, event: PullRequestEvent) -> None:
        pr = event.pull_request
        repository = event.repository
        owner = repository.owner.login
        label = f"{repository.full_name}#{pr.number}"

        logger.info(f"Processing PR {label} ({event.action})")

        try:
            diff = await self._github.get_pull_request_diff(owner, repository.name, pr.number)
        except Exception as e:
            logger.error(f"Skipping PR {label}: failed to fetch diff: {e}")
            return

        if not diff:
            logger.warning(f"Skipping PR {label}: empty diff")
            return

        review = await self._analyze(diff, f"PR {label}")
        if review is None:
            return

        if self._settings.github_pr_review_enabled:
            await self.submit_pull_request_review(owner, repository.name, pr.number, review)

        metadata = CommitMetadata(
            repo=repository.full_name,
            author=pr.user.login,
            date=format_date(),
            url=pr.html_url,
        )
        await self.notify(review, metadata)

    async def submit_pull_request_review(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        review: StructuredReview,
    ) -> None:
        decision = severity_to_decision(review.overall_severity)
        comments = findings_to_comments(review.findings)
        try:
            await self._github.submit_review(
                owner=owner,
                repo=repo,
                pr_number=pr_number,
                body=review.summary,
                event=decision,
                comments=comments,
            )
            logger.info(
                f"Submitted {decision} review on {owner}/{repo}#{pr_number} "
                f"with {len(comments)} inline comment(s)"
            )
        except Exception as e:
            logger.error(f"Failed to submit review on {owner}/{repo}#{pr_number}: {e}")

    async def notify(
        self,
        review: StructuredReview,
        metadata: CommitMetadata,
        author_email: Optional[str] = None,
    ) -> None:
        """Fan the review out to every enabled channel; one failure never stops the rest."""
        logger.info(f"Sending notifications for {metadata.url}")

        for notifier in self._notifiers.broadcast:
            try:
                await notifier.send(review, metadata)
                logger.info(f"{notifier.name} notification sent")
            except Exception as e:
                logger.error(f"{notifier.name} notification failed: {e}")

        email = self._notifiers.email
        if email is None:
            return

        if not is_deliverable_email(author_email):
            logger.warning(f"Invalid or missing email address for author: {author_email!r}")
            return

        try:
            await email.send(review, metadata, recipient=author_email)
            logger.info(f"Email sent to {author_email}")
        except Exception as e:
            logger.error(f"Failed to send email to {author_email}: {e}")

    async def _analyze(self, diff: str, label: str) -> Optional[StructuredReview]:
        logger.info(f"Analyzing changes for {label}")
        try:
            review = await self._reviewer.analyze_diff(diff)
        except Exception as e:
            logger.error(f"Skipping {label}: AI analysis failed: {e}")
            return None

        logger.info(f"Review completed for {label}. Overall severity: {review.overall_severity}")
        return review
