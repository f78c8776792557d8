"""Map a structured review onto a GitHub pull request review."""

from src.schemas.review import (
    OverallSeverity,
    ReviewComment,
    ReviewDecision,
    ReviewFinding,
)

SEVERITY_DECISIONS: dict[str, ReviewDecision] = {
    "clean": "APPROVE",
    "critical": "REQUEST_CHANGES",
    "warning": "REQUEST_CHANGES",
    "info": "COMMENT",
}

SEVERITY_EMOJI = {
    "critical": "🔴",
    "warning": "🟡",
    "info": "🔵",
}


def severity_to_decision(overall_severity: OverallSeverity) -> ReviewDecision:
    """Pick the review event for an overall severity."""
    return SEVERITY_DECISIONS[overall_severity]


def findings_to_comments(findings: list[ReviewFinding]) -> list[ReviewComment]:
    """Turn located findings into inline comments anchored on the range's last line.

    Findings without a file path or line range are left out; they still appear
    in the review summary.
    """
    return [
        ReviewComment(
            path=finding.file_path,
            line=finding.line_range.end,
            body=format_comment_body(finding),
        )
        for finding in findings
        if finding.file_path and finding.line_range
    ]


def format_comment_body(finding: ReviewFinding) -> str:
    emoji = SEVERITY_EMOJI.get(finding.severity, "🔵")
    body = f"{emoji} **{finding.severity.upper()}**: {finding.title}\n\n{finding.description}"

    if finding.suggestion:
        body += f"\n\n**Suggestion:** {finding.suggestion}"

    if finding.code_suggestion:
        body += f"\n\n```suggestion\n{finding.code_suggestion}\n```"

    return body
