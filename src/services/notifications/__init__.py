"""Notification channels."""

from src.config import Settings
from src.core.logging import get_logger
from src.services.notifications.base import CommitMetadata, Notifier, NotifierSet
from src.services.notifications.email_notifier import EmailNotifier
from src.services.notifications.slack import SlackNotifier
from src.services.notifications.teams import TeamsNotifier

logger = get_logger("notifications")


def build_notifiers(settings: Settings) -> NotifierSet:
    """Select the enabled channels once from validated settings."""
    broadcast: list[Notifier] = []

    if settings.teams_enabled:
        broadcast.append(TeamsNotifier(settings.teams_webhook_url))
        logger.info("Teams notifier initialized")

    if settings.slack_enabled:
        broadcast.append(SlackNotifier.from_token(settings.slack_bot_token, settings.slack_channel_id))
        logger.info("Slack notifier initialized")

    email = None
    if settings.email_enabled:
        email = EmailNotifier(
            host=settings.email_host,
            port=settings.email_port,
            user=settings.email_user,
            password=settings.email_pass,
            sender=settings.email_from,
            secure=settings.email_secure,
            default_to=settings.email_to,
        )
        logger.info("Email notifier initialized")

    if not broadcast and email is None:
        logger.info("No notification channels enabled")

    return NotifierSet(broadcast=broadcast, email=email)


__all__ = [
    "CommitMetadata",
    "EmailNotifier",
    "Notifier",
    "NotifierSet",
    "SlackNotifier",
    "TeamsNotifier",
    "build_notifiers",
]
