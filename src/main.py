"""Diff Review Agent - FastAPI entry point."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.config import Settings
from src.core.exceptions import ApiException
from src.core.logging import configure_logging, get_logger
from src.core.schemas.responses import ErrorResponse, HealthResponse
from src.services.github.client import GithubClient
from src.services.github.routes import router as github_router
from src.services.github.service import GithubWebhookService
from src.services.notifications import build_notifiers
from src.services.reviewer.analyzer import AiReviewer
from src.services.reviewer.service import ReviewService

logger = get_logger("main")

VERSION = "0.1.0"


async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
    """Handle custom API exceptions and return structured error response."""
    logger.warning(f"API error: {exc.message} (status={exc.status_code})")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.message,
            details=exc.details if exc.details else None,
        ).model_dump(exclude_none=True),
    )


def build_review_service(settings: Settings) -> ReviewService:
    """Wire the clients and channels that live for the whole process."""
    return ReviewService(
        settings=settings,
        github=GithubClient(settings.github_token, api_url=settings.github_api_url),
        reviewer=AiReviewer.from_settings(settings),
        notifiers=build_notifiers(settings),
    )


def create_app(
    settings: Optional[Settings] = None,
    review_service: Optional[ReviewService] = None,
) -> FastAPI:
    """Build the application from one settings object."""
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="Diff Review Agent",
        description="AI code review for GitHub pushes and pull requests",
        version=VERSION,
    )
    app.state.webhook_service = GithubWebhookService(
        settings=settings,
        review_service=review_service or build_review_service(settings),
    )

    app.add_exception_handler(ApiException, api_exception_handler)
    app.include_router(github_router, prefix="/webhooks")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "diff-review-agent",
            "version": VERSION,
            "status": "running",
        }

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse()

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    logger.info(f"Starting Diff Review Agent on {settings.host}:{settings.port}")
    uvicorn.run(
        "src.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
