"""GitHub webhook routes."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from src.core.exceptions import ApiException, InternalServerError
from src.core.logging import get_logger, log_context
from src.services.github.schemas import WebhookResponse
from src.services.github.service import GithubWebhookService

logger = get_logger("github.routes")

router = APIRouter()


def get_webhook_service(request: Request) -> GithubWebhookService:
    return request.app.state.webhook_service


@router.post("/github", response_model=WebhookResponse, response_model_exclude_none=True)
async def github_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    service: GithubWebhookService = Depends(get_webhook_service),
):
    """Handle GitHub webhook events."""
    event = request.headers.get("X-GitHub-Event")
    signature = request.headers.get("X-Hub-Signature-256")
    delivery_id = request.headers.get("X-GitHub-Delivery")

    body = await request.body()

    with log_context(delivery=delivery_id):
        logger.info(f"Webhook received: event={event}")
        try:
            return await service.handle_webhook(
                signature=signature,
                raw_body=body,
                event=event,
                background_tasks=background_tasks,
                delivery_id=delivery_id,
            )
        except ApiException:
            raise
        except Exception as e:
            logger.exception("Error processing webhook")
            raise InternalServerError(str(e)) from e
