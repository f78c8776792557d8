"""GitHub API client - data layer."""

from typing import Any, Optional

import httpx

from src.core.exceptions import UpstreamError
from src.core.logging import get_logger
from src.schemas.review import ReviewComment, ReviewDecision

logger = get_logger("github.client")

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
JSON_MEDIA_TYPE = "application/vnd.github+json"
USER_AGENT = "diff-review-agent"


class GithubClient:
    """Fetches diffs and submits pull request reviews with a bearer token.

    Built once at startup; holds no per-request state. Every call is a single
    request to the REST API.
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    async def get_commit_diff(self, owner: str, repo: str, sha: str) -> str:
        """Fetch the unified diff of a single commit."""
        return await self._get_diff(f"/repos/{owner}/{repo}/commits/{sha}", f"commit {sha}")

    async def get_pull_request_diff(self, owner: str, repo: str, pr_number: int) -> str:
        """Fetch the unified diff of a pull request."""
        return await self._get_diff(f"/repos/{owner}/{repo}/pulls/{pr_number}", f"PR #{pr_number}")

    async def _get_diff(self, path: str, label: str) -> str:
        response = await self._request(
            "GET",
            path,
            accept=DIFF_MEDIA_TYPE,
            failure=f"Failed to fetch diff for {label}",
        )
        logger.debug(f"Fetched diff for {label} ({len(response.text)} chars)")
        return response.text

    async def submit_review(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        body: str,
        event: ReviewDecision,
        comments: list[ReviewComment],
    ) -> None:
        """Submit a formal review on a pull request."""
        await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{pr_number}/reviews",
            accept=JSON_MEDIA_TYPE,
            failure=f"Failed to submit review on {owner}/{repo}#{pr_number}",
            json={
                "body": body,
                "event": event,
                "comments": [c.model_dump() for c in comments],
            },
        )
        logger.info(f"Created {event} review on {owner}/{repo}#{pr_number} with {len(comments)} comments")

    async def _request(
        self,
        method: str,
        path: str,
        accept: str,
        failure: str,
        json: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": accept,
            "User-Agent": USER_AGENT,
        }
        try:
            async with httpx.AsyncClient(
                base_url=self._api_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, headers=headers, json=json)
        except httpx.HTTPError as e:
            raise UpstreamError(f"{failure}: {e}") from e

        if not response.is_success:
            raise UpstreamError(
                f"{failure}: GitHub API responded with {response.status_code}",
                status=response.status_code,
                body=response.text,
            )
        return response
