"""Review-related schemas."""

from typing import Literal

from pydantic import BaseModel, Field

FindingSeverity = Literal["critical", "warning", "info"]
OverallSeverity = Literal["critical", "warning", "info", "clean"]
ReviewDecision = Literal["APPROVE", "REQUEST_CHANGES", "COMMENT"]


class LineRange(BaseModel):
    start: int
    end: int


class ReviewFinding(BaseModel):
    """A single issue found in the diff."""

    severity: FindingSeverity
    file_path: str = Field(description="The file path affected by this finding")
    line_range: LineRange | None = Field(
        default=None,
        description="Line range in the new file, or null if not applicable",
    )
    title: str = Field(description="Short title summarizing the finding")
    description: str = Field(description="Detailed explanation of the issue found")
    suggestion: str | None = Field(
        default=None,
        description="Suggested fix or improvement in natural language, or null if none",
    )
    code_suggestion: str | None = Field(
        default=None,
        description="A concise code snippet illustrating the fix, or null if not applicable",
    )


class StructuredReview(BaseModel):
    """Structured result of an AI review of one diff.

    ``overall_severity`` is taken as reported by the analyzer and is never
    recomputed from ``findings``.
    """

    summary: str = Field(
        description="A 2-3 sentence overall summary of the change quality and main concerns"
    )
    overall_severity: OverallSeverity = Field(
        description="The highest severity level found across all findings, or clean"
    )
    findings: list[ReviewFinding] = Field(
        default_factory=list,
        description="List of specific issues found in the code",
    )


class ReviewComment(BaseModel):
    """Inline comment for a GitHub pull request review."""

    path: str
    line: int
    body: str
