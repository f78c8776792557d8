"""
Logging configuration for the diff review agent.

Every record carries three extra fields: ``logger_name`` (bound per module
by :func:`get_logger`), and ``delivery`` and ``job`` (set for the duration of
a webhook delivery or background review by :func:`log_context`).
"""

import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger

from src.config import Settings

DEFAULT_EXTRA = {"logger_name": "app", "delivery": None, "job": None}


def _development_format(record) -> str:
    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<blue>{extra[logger_name]}</blue>:<blue>{function}</blue>:<blue>{line}</blue>"
    )
    if record["extra"].get("delivery"):
        fmt += " <cyan>delivery={extra[delivery]}</cyan>"
    if record["extra"].get("job"):
        fmt += " <magenta>[{extra[job]}]</magenta>"
    return fmt + " - <level>{message}</level>\n{exception}"


def configure_logging(settings: Settings) -> None:
    """Install the sinks for the current environment."""

    logger.remove()
    logger.configure(extra=DEFAULT_EXTRA)

    log_level = "DEBUG" if settings.debug else "INFO"

    if settings.environment == "development":
        logger.add(
            sys.stderr,
            format=_development_format,
            level=log_level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )
    else:
        # JSON lines; delivery and job land under record.extra
        logger.add(
            sys.stderr,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[logger_name]} - {message}",
            level=log_level,
            serialize=True,
        )


@contextmanager
def log_context(delivery: Optional[str] = None, job: Optional[str] = None) -> Iterator[None]:
    """Tag every record logged inside the block with a delivery and/or job."""
    fields = {key: value for key, value in (("delivery", delivery), ("job", job)) if value}
    with logger.contextualize(**fields):
        yield


def get_logger(name: Optional[str] = None):
    """Get a logger instance with optional name binding."""
    if name:
        return logger.bind(logger_name=name)
    return logger
