"""GitHub webhook service - validation and dispatch."""

import json
from typing import Any, Optional

from fastapi import BackgroundTasks
from pydantic import BaseModel, ValidationError

from src.config import Settings
from src.core.exceptions import InvalidPayloadError, MalformedPayloadError
from src.core.logging import get_logger
from src.core.security import require_github_signature
from src.services.github.schemas import (
    SUPPORTED_PR_ACTIONS,
    PullRequestEvent,
    PushEvent,
    WebhookResponse,
)
from src.services.reviewer.background import BackgroundDispatcher
from src.services.reviewer.service import ReviewService

logger = get_logger("github.service")


def parse_event(model: type[BaseModel], payload: Any) -> Any:
    """Validate a parsed body against an event schema."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        logger.warning(f"Invalid GitHub payload for {model.__name__}: {errors}")
        raise InvalidPayloadError({"errors": errors}) from e


class GithubWebhookService:
    """Authenticates a delivery, picks what to do with it and hands reviews off."""

    def __init__(
        self,
        settings: Settings,
        review_service: ReviewService,
        dispatcher: Optional[BackgroundDispatcher] = None,
    ) -> None:
        self._settings = settings
        self._review_service = review_service
        self._dispatcher = dispatcher or BackgroundDispatcher()

    async def handle_webhook(
        self,
        signature: Optional[str],
        raw_body: bytes,
        event: Optional[str],
        background_tasks: BackgroundTasks,
        delivery_id: Optional[str] = None,
    ) -> WebhookResponse:
        require_github_signature(self._settings.github_webhook_secret, raw_body, signature)

        try:
            payload = json.loads(raw_body)
        except ValueError as e:
            raise MalformedPayloadError() from e

        if event == "push":
            return self._handle_push(payload, background_tasks, delivery_id)
        if event == "pull_request":
            return self._handle_pull_request(payload, background_tasks, delivery_id)
        if event == "ping":
            return WebhookResponse(message="pong", event=event, delivery=delivery_id)

        if not event:
            logger.info("Webhook without X-GitHub-Event header, ignoring")
            return WebhookResponse(message="No event type provided", delivery=delivery_id)

        logger.info(f"Unhandled event type: {event}")
        return WebhookResponse(message=f"Event {event} not handled", event=event, delivery=delivery_id)

    def _handle_push(
        self,
        payload: Any,
        background_tasks: BackgroundTasks,
        delivery_id: Optional[str],
    ) -> WebhookResponse:
        if not self._settings.github_push_review_enabled:
            logger.info("Push review disabled, ignoring push event")
            return WebhookResponse(message="Push review disabled", event="push", delivery=delivery_id)

        push = parse_event(PushEvent, payload)
        target = f"{push.repository.full_name}@{push.after[:7]}"
        logger.info(f"Push event: {len(push.commits)} commit(s) on {push.repository.full_name} {push.ref}")

        self._dispatcher.schedule(
            background_tasks,
            self._review_service.process_push_event,
            push,
            label=f"push {target}",
            delivery=delivery_id,
        )
        return WebhookResponse(message="Review started", event="push", delivery=delivery_id, target=target)

    def _handle_pull_request(
        self,
        payload: Any,
        background_tasks: BackgroundTasks,
        delivery_id: Optional[str],
    ) -> WebhookResponse:
        action = payload.get("action") if isinstance(payload, dict) else None
        if action is not None and action not in SUPPORTED_PR_ACTIONS:
            logger.info(f"PR action {action} not reviewed")
            return WebhookResponse(
                message=f"Action {action} not reviewed",
                event="pull_request",
                delivery=delivery_id,
            )

        pr_event = parse_event(PullRequestEvent, payload)
        target = f"{pr_event.repository.full_name}#{pr_event.pull_request.number}"
        logger.info(f"PR event: {pr_event.action} on {target}")

        self._dispatcher.schedule(
            background_tasks,
            self._review_service.process_pull_request_event,
            pr_event,
            label=f"pull_request {target}",
            delivery=delivery_id,
        )
        return WebhookResponse(
            message="Review started",
            event="pull_request",
            delivery=delivery_id,
            target=target,
        )
