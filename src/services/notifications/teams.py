"""Microsoft Teams notifier - Adaptive Card over an incoming webhook."""

from typing import Optional

import httpx

from src.core.exceptions import NotificationError
from src.core.logging import get_logger
from src.schemas.review import StructuredReview
from src.services.notifications.base import CommitMetadata, Notifier

logger = get_logger("notifications.teams")

MAX_FINDINGS = 10

SEVERITY_COLORS = {
    "critical": "Attention",
    "warning": "Warning",
    "info": "Accent",
    "clean": "Good",
}

SEVERITY_ICONS = {
    "critical": "🔴",
    "warning": "🟠",
    "info": "🔵",
    "clean": "🟢",
}


def _location(finding) -> str:
    if finding.line_range:
        return f"{finding.file_path} (L{finding.line_range.start}-{finding.line_range.end})"
    return finding.file_path


def _finding_container(finding) -> dict:
    items = [
        {
            "type": "TextBlock",
            "text": f"{SEVERITY_ICONS.get(finding.severity, '▪️')} **{finding.title}**",
            "wrap": True,
            "color": SEVERITY_COLORS.get(finding.severity, "Default"),
        },
        {
            "type": "TextBlock",
            "spacing": "None",
            "text": f"File: {_location(finding)}",
            "isSubtle": True,
            "wrap": True,
            "size": "Small",
        },
        {"type": "TextBlock", "text": finding.description, "wrap": True, "size": "Small"},
    ]
    if finding.suggestion:
        items.append(
            {
                "type": "TextBlock",
                "text": f"**Suggestion:** {finding.suggestion}",
                "wrap": True,
                "size": "Small",
                "spacing": "Small",
            }
        )
    if finding.code_suggestion:
        items.append(
            {
                "type": "Container",
                "style": "emphasis",
                "spacing": "Small",
                "items": [
                    {
                        "type": "TextBlock",
                        "text": finding.code_suggestion,
                        "wrap": True,
                        "fontType": "Monospace",
                        "size": "Small",
                    }
                ],
            }
        )
    return {"type": "Container", "separator": True, "items": items}


def build_adaptive_card(review: StructuredReview, metadata: CommitMetadata) -> dict:
    """Build the Teams message envelope for a review."""
    severity = review.overall_severity
    color = SEVERITY_COLORS.get(severity, "Default")
    icon = SEVERITY_ICONS.get(severity, "📝")

    body = [
        {
            "type": "ColumnSet",
            "columns": [
                {
                    "type": "Column",
                    "width": "stretch",
                    "items": [
                        {
                            "type": "TextBlock",
                            "text": f"AI Review: {metadata.repo}",
                            "weight": "Bolder",
                            "size": "Medium",
                        },
                        {
                            "type": "TextBlock",
                            "text": f"{icon} Status: {severity.upper()}",
                            "color": color,
                            "spacing": "None",
                        },
                    ],
                }
            ],
        },
        {
            "type": "Container",
            "style": "emphasis",
            "bleed": True,
            "items": [{"type": "TextBlock", "text": review.summary, "wrap": True, "italic": True}],
        },
        {
            "type": "FactSet",
            "facts": [
                {"title": "Author", "value": metadata.author},
                {"title": "Date", "value": metadata.date},
                {"title": "Link", "value": f"[View on GitHub]({metadata.url})"},
            ],
        },
        {
            "type": "Container",
            "items": [_finding_container(f) for f in review.findings[:MAX_FINDINGS]],
        },
    ]

    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "content": {
                    "type": "AdaptiveCard",
                    "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
                    "version": "1.4",
                    "body": body,
                    "actions": [
                        {"type": "Action.OpenUrl", "title": "View on GitHub", "url": metadata.url}
                    ],
                },
            }
        ],
    }


class TeamsNotifier(Notifier):
    """Posts an Adaptive Card to a Teams incoming webhook."""

    name = "teams"

    def __init__(
        self,
        webhook_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 15.0,
    ) -> None:
        self._webhook_url = webhook_url
        self._transport = transport
        self._timeout = timeout

    async def send(
        self,
        review: StructuredReview,
        metadata: CommitMetadata,
        recipient: Optional[str] = None,
    ) -> None:
        card = build_adaptive_card(review, metadata)
        logger.debug(f"Sending Adaptive Card to Teams webhook: {self._webhook_url[:20]}...")

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._webhook_url, json=card)
        except httpx.HTTPError as e:
            raise NotificationError(f"Failed to send Teams notification: {e}") from e

        if not response.is_success:
            raise NotificationError(
                f"Failed to send Teams notification: Teams responded with "
                f"{response.status_code}: {response.text}"
            )
