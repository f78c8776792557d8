"""Slack notifier - posts a Block Kit summary to a channel."""

import asyncio
from typing import Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from src.core.exceptions import NotificationError
from src.core.logging import get_logger
from src.schemas.review import StructuredReview
from src.services.notifications.base import CommitMetadata, Notifier
from src.services.reviewer.mapper import SEVERITY_EMOJI, severity_to_decision

logger = get_logger("notifications.slack")

MAX_FINDINGS = 10

STATUS_LABELS = {
    "critical": "🔴 Critical",
    "warning": "🟡 Warning",
    "info": "🔵 Info",
    "clean": "🟢 Clean",
}


def build_review_blocks(review: StructuredReview, metadata: CommitMetadata) -> list[dict]:
    """Build Slack blocks for a review notification."""
    findings = review.findings[:MAX_FINDINGS]
    issues_text = (
        "None"
        if not findings
        else "\n".join(
            f"{SEVERITY_EMOJI.get(f.severity, '•')} *{f.title}* `{f.file_path}`" for f in findings
        )
    )

    return [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": f"⚡ AI Review: {metadata.repo}", "emoji": True},
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*<{metadata.url}|View on GitHub>*\nby `{metadata.author}`"},
            "accessory": {
                "type": "button",
                "text": {"type": "plain_text", "text": "Open", "emoji": True},
                "url": metadata.url,
                "action_id": "view_review_target",
            },
        },
        {"type": "divider"},
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*Severity*\n{STATUS_LABELS[review.overall_severity]}"},
                {"type": "mrkdwn", "text": f"*Verdict*\n{severity_to_decision(review.overall_severity)}"},
            ],
        },
        {"type": "section", "text": {"type": "mrkdwn", "text": f"*Summary*\n{review.summary}"}},
        {"type": "section", "text": {"type": "mrkdwn", "text": f"*Issues Found*\n{issues_text}"}},
        {"type": "divider"},
        {
            "type": "context",
            "elements": [
                {"type": "mrkdwn", "text": f":speech_balloon: *{len(review.findings)}* findings"},
                {"type": "mrkdwn", "text": "|"},
                {"type": "mrkdwn", "text": metadata.date},
            ],
        },
    ]


class SlackNotifier(Notifier):
    """Posts review summaries to one Slack channel."""

    name = "slack"

    def __init__(self, client: WebClient, channel: str) -> None:
        self._client = client
        self._channel = channel

    @classmethod
    def from_token(cls, token: str, channel: str) -> "SlackNotifier":
        return cls(WebClient(token=token), channel)

    async def send(
        self,
        review: StructuredReview,
        metadata: CommitMetadata,
        recipient: Optional[str] = None,
    ) -> None:
        blocks = build_review_blocks(review, metadata)
        text = f"AI Review: {metadata.repo} - {review.overall_severity}"

        try:
            await asyncio.to_thread(
                self._client.chat_postMessage,
                channel=self._channel,
                blocks=blocks,
                text=text,
            )
        except SlackApiError as e:
            raise NotificationError(f"Slack API error: {e.response['error']}") from e

        logger.info(f"Posted review to Slack channel {self._channel}")
