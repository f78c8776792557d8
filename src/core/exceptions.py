"""Custom exceptions for the application."""


class ApiException(Exception):
    """Base exception for all API errors."""

    def __init__(
        self,
        status_code: int,
        message: str,
        details: dict | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(ApiException):
    """Webhook signature missing, malformed or wrong."""

    def __init__(self, message: str = "Invalid webhook signature") -> None:
        super().__init__(401, message)


class MalformedPayloadError(ApiException):
    """Request body is not valid JSON."""

    def __init__(self) -> None:
        super().__init__(400, "Invalid JSON")


class InvalidPayloadError(ApiException):
    """Valid JSON that does not match the event schema."""

    def __init__(self, details: dict) -> None:
        super().__init__(400, "Invalid Payload", details)


class InternalServerError(ApiException):
    """Unexpected failure while handling a request synchronously."""

    def __init__(self, message: str) -> None:
        super().__init__(500, "Internal Server Error", {"message": message})


class ReviewPipelineError(Exception):
    """Base for failures inside the background review pipeline."""


class AnalysisError(ReviewPipelineError):
    """AI call failed or returned unusable output."""


class UpstreamError(ReviewPipelineError):
    """GitHub API responded with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status: int | None = None, body: str | None = None) -> None:
        self.status = status
        self.body = body
        super().__init__(message)


class NotificationError(ReviewPipelineError):
    """A notification channel failed to deliver."""
