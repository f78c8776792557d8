"""Configuration for the diff review agent."""

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Built once by ``create_app`` and passed to every component that needs it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    environment: str = Field(default="development")
    debug: bool = Field(default=True)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    # GitHub
    github_token: str = Field(min_length=1)
    github_webhook_secret: str = Field(min_length=1)
    github_api_url: str = Field(default="https://api.github.com")

    # LLM - OpenRouter first, OpenAI as fallback
    openrouter_api_key: Optional[str] = Field(default=None)
    openai_api_key: Optional[str] = Field(default=None)
    review_model: str = Field(default="gpt-4o")

    # Event toggles
    github_push_review_enabled: bool = Field(default=True)
    github_pr_review_enabled: bool = Field(default=True)
    push_review_concurrency: int = Field(default=1, ge=1)

    # Microsoft Teams
    teams_enabled: bool = Field(default=False)
    teams_webhook_url: Optional[str] = Field(default=None)

    # Slack
    slack_enabled: bool = Field(default=False)
    slack_bot_token: Optional[str] = Field(default=None)
    slack_channel_id: Optional[str] = Field(default=None)

    # Email
    email_enabled: bool = Field(default=False)
    email_host: Optional[str] = Field(default=None)
    email_port: int = Field(default=587)
    email_user: Optional[str] = Field(default=None)
    email_pass: Optional[str] = Field(default=None)
    email_from: Optional[str] = Field(default=None)
    email_secure: bool = Field(default=False)
    email_to: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def check_channels(self) -> "Settings":
        if not (self.openrouter_api_key or self.openai_api_key):
            raise ValueError("Either OPENROUTER_API_KEY or OPENAI_API_KEY must be set")
        if self.email_enabled and not (self.email_host and self.email_user and self.email_pass):
            raise ValueError("EMAIL_HOST, EMAIL_USER and EMAIL_PASS are required when EMAIL_ENABLED is true")
        if self.teams_enabled and not self.teams_webhook_url:
            raise ValueError("TEAMS_WEBHOOK_URL is required when TEAMS_ENABLED is true")
        if self.slack_enabled and not (self.slack_bot_token and self.slack_channel_id):
            raise ValueError("SLACK_BOT_TOKEN and SLACK_CHANNEL_ID are required when SLACK_ENABLED is true")
        return self
