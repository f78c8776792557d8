"""LLM client using OpenRouter, with OpenAI as a fallback provider."""

from typing import Type, TypeVar
from langchain_openai import ChatOpenAI
from langchain_core.runnables import Runnable
from src.config import Settings
from src.core.logging import get_logger

logger = get_logger("llm")

T = TypeVar("T")

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

SUPPORTED_MODELS = {
    "claude-sonnet-4": {
        "model_id": "anthropic/claude-sonnet-4",
        "structured_method": "function_calling",
    },
    "claude-opus-4": {
        "model_id": "anthropic/claude-opus-4",
        "structured_method": "function_calling",
    },
    "gpt-4o": {
        "model_id": "openai/gpt-4o",
        "structured_method": "json_schema",
    },
    "gpt-4o-mini": {
        "model_id": "openai/gpt-4o-mini",
        "structured_method": "json_schema",
    },
    "deepseek-r1": {
        "model_id": "deepseek/deepseek-r1",
        "structured_method": "function_calling",
    },
}


def resolve_model(settings: Settings) -> tuple[str, str]:
    """Return (model_id, structured_method) for the configured provider."""
    model = settings.review_model
    config = SUPPORTED_MODELS.get(model)

    if settings.openrouter_api_key:
        if config:
            return config["model_id"], config["structured_method"]
        return model, "function_calling"

    # OpenAI direct takes bare model names
    if config:
        return config["model_id"].split("/", 1)[-1], config["structured_method"]
    return model, "json_schema"


def get_chat_llm(settings: Settings, temperature: float = 0.0, top_p: float = 0.95) -> ChatOpenAI:
    """Get a chat LLM instance via OpenRouter or OpenAI."""
    model_id, _ = resolve_model(settings)

    if settings.openrouter_api_key:
        logger.info(f"[LLM] Using OpenRouter: {settings.review_model} -> {model_id}")
        return ChatOpenAI(
            model=model_id,
            api_key=settings.openrouter_api_key,
            base_url=OPENROUTER_BASE_URL,
            temperature=temperature,
            top_p=top_p,
        )

    if not settings.openai_api_key:
        raise ValueError("OPENROUTER_API_KEY or OPENAI_API_KEY not configured")

    logger.info(f"[LLM] Using OpenAI: {model_id}")
    return ChatOpenAI(
        model=model_id,
        api_key=settings.openai_api_key,
        temperature=temperature,
        top_p=top_p,
    )


def get_structured_llm(
    output_model: Type[T],
    settings: Settings,
    temperature: float = 0.0,
) -> Runnable:
    """Get a structured output LLM instance."""
    _, method = resolve_model(settings)
    base_llm = get_chat_llm(settings, temperature=temperature)
    return base_llm.with_structured_output(output_model, method=method)
