"""Prompt templates using Jinja2."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

PROMPTS_DIR = Path(__file__).parent
_env = Environment(loader=FileSystemLoader(PROMPTS_DIR), keep_trailing_newline=False)


def render_review_system_prompt() -> str:
    """Render the reviewer's system prompt."""
    template = _env.get_template("code_review_system.jinja2")
    return template.render()


def render_code_review_prompt(diff: str) -> str:
    """Render the user prompt carrying the diff to review."""
    template = _env.get_template("code_review.jinja2")
    return template.render(diff=diff)
