"""Email notifier - HTML review report over SMTP."""

import asyncio
import smtplib
from email.message import EmailMessage
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from src.core.exceptions import NotificationError
from src.core.logging import get_logger
from src.schemas.review import StructuredReview
from src.services.notifications.base import CommitMetadata, Notifier

logger = get_logger("notifications.email")

TEMPLATES_DIR = Path(__file__).parent / "templates"
_env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=True)

SEVERITY_COLORS = {
    "critical": "#dc2626",
    "warning": "#f59e0b",
    "info": "#3b82f6",
    "clean": "#10b981",
}


def render_review_html(review: StructuredReview, metadata: CommitMetadata) -> str:
    """Render the HTML email body."""
    template = _env.get_template("review_email.html.jinja2")
    return template.render(review=review, metadata=metadata, colors=SEVERITY_COLORS)


class EmailNotifier(Notifier):
    """Sends the review to one recipient through an SMTP relay."""

    name = "email"

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        sender: Optional[str] = None,
        secure: bool = False,
        default_to: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._sender = sender or user
        self._secure = secure
        self._default_to = default_to
        self._timeout = timeout

    async def send(
        self,
        review: StructuredReview,
        metadata: CommitMetadata,
        recipient: Optional[str] = None,
    ) -> None:
        to = recipient or self._default_to
        if not to:
            raise NotificationError("No recipient email provided")

        message = EmailMessage()
        message["Subject"] = f"[{review.overall_severity.upper()}] AI Code Review: {metadata.repo}"
        message["From"] = self._sender
        message["To"] = to
        message.set_content(f"{review.summary}\n\n{metadata.url}")
        message.add_alternative(render_review_html(review, metadata), subtype="html")

        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send email: {e}") from e

    def _deliver(self, message: EmailMessage) -> None:
        if self._secure:
            smtp = smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout)
        else:
            smtp = smtplib.SMTP(self._host, self._port, timeout=self._timeout)

        with smtp:
            if not self._secure:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
            smtp.login(self._user, self._password)
            smtp.send_message(message)
