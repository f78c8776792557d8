"""Notification channel interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from src.schemas.review import StructuredReview


@dataclass(frozen=True)
class CommitMetadata:
    """Normalized description of the reviewed commit or pull request."""

    repo: str
    author: str
    date: str
    url: str


class Notifier(ABC):
    """A channel that receives finished reviews.

    Implementations are configured once and never mutate what they are given.
    """

    name: str = "notifier"

    @abstractmethod
    async def send(
        self,
        review: StructuredReview,
        metadata: CommitMetadata,
        recipient: Optional[str] = None,
    ) -> None:
        """Deliver the review.

        Raises:
            NotificationError: If delivery fails
        """


@dataclass(frozen=True)
class NotifierSet:
    """Channels enabled for this process.

    ``broadcast`` channels receive every review; ``email`` is addressed to the
    commit author when one can be resolved.
    """

    broadcast: list[Notifier] = field(default_factory=list)
    email: Optional[Notifier] = None
