"""AI reviewer - sends a diff to the LLM and returns a structured review."""

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.runnables import Runnable
from pydantic import ValidationError

from src.config import Settings
from src.core.exceptions import AnalysisError
from src.core.llm import get_structured_llm
from src.core.logging import get_logger
from src.core.prompts import render_code_review_prompt, render_review_system_prompt
from src.schemas.review import StructuredReview

logger = get_logger("reviewer.analyzer")


class AiReviewer:
    """Single-call structured reviewer."""

    def __init__(self, llm: Runnable) -> None:
        self._llm = llm
        self._system_prompt = render_review_system_prompt()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AiReviewer":
        return cls(get_structured_llm(StructuredReview, settings))

    async def analyze_diff(self, diff: str) -> StructuredReview:
        """Review a diff.

        Raises:
            AnalysisError: On transport failure, empty output or output that
                does not match the review schema.
        """
        messages = [
            SystemMessage(content=self._system_prompt),
            HumanMessage(content=render_code_review_prompt(diff)),
        ]

        try:
            result = await self._llm.ainvoke(messages)
        except Exception as e:
            logger.error(f"AI analysis failed: {e}")
            raise AnalysisError(f"AI analysis failed: {e}") from e

        if result is None:
            raise AnalysisError("AI returned an empty response.")

        try:
            if isinstance(result, StructuredReview):
                return StructuredReview.model_validate(result.model_dump())
            return StructuredReview.model_validate(result)
        except ValidationError as e:
            raise AnalysisError(f"AI returned an invalid review: {e}") from e
