"""Detached execution of review jobs.

Webhook handlers answer GitHub as soon as the payload is validated; the review
itself runs afterwards as a FastAPI background task. Whatever escapes the job
ends up in the log, never in the HTTP response.
"""

from typing import Any, Awaitable, Callable, Optional

from fastapi import BackgroundTasks

from src.core.logging import get_logger, log_context

logger = get_logger("reviewer.background")

ReviewJob = Callable[..., Awaitable[Any]]


class BackgroundDispatcher:
    """Schedules review jobs to run after the response is sent."""

    def schedule(
        self,
        background_tasks: BackgroundTasks,
        job: ReviewJob,
        *args: Any,
        label: str,
        delivery: Optional[str] = None,
    ) -> None:
        logger.info(f"Scheduling background review: {label}")
        background_tasks.add_task(run_detached, job, *args, label=label, delivery=delivery)


async def run_detached(
    job: ReviewJob,
    *args: Any,
    label: str,
    delivery: Optional[str] = None,
) -> None:
    """Run a job to completion, logging instead of raising.

    Everything the job logs is tagged with its label and the delivery that
    triggered it.
    """
    with log_context(delivery=delivery, job=label):
        try:
            await job(*args)
            logger.info(f"Background review finished: {label}")
        except Exception:
            logger.exception(f"Background review failed: {label}")
