#!/usr/bin/env python3
"""Run a single review locally and print the structured result."""
import argparse
import asyncio
from dotenv import load_dotenv

load_dotenv()

from src.config import Settings
from src.services.github.client import GithubClient
from src.services.reviewer.analyzer import AiReviewer


async def main(owner: str, repo: str, sha: str | None, pr: int | None):
    settings = Settings()
    github = GithubClient(settings.github_token, api_url=settings.github_api_url)
    if pr is not None:
        diff = await github.get_pull_request_diff(owner, repo, pr)
    else:
        diff = await github.get_commit_diff(owner, repo, sha)

    review = await AiReviewer.from_settings(settings).analyze_diff(diff)
    print(review.model_dump_json(indent=2))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("owner")
    parser.add_argument("repo")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--sha", help="commit SHA to review")
    target.add_argument("--pr", type=int, help="pull request number to review")
    args = parser.parse_args()
    asyncio.run(main(args.owner, args.repo, args.sha, args.pr))
