"""Webhook signature verification."""

import hashlib
import hmac
from typing import Optional

from src.core.exceptions import AuthenticationError
from src.core.logging import get_logger

logger = get_logger("security")

SIGNATURE_ALGORITHM = "sha256"


def verify_github_signature(secret: str, payload: bytes, signature: Optional[str]) -> bool:
    """Verify GitHub webhook signature using HMAC-SHA256.

    Args:
        secret: Shared webhook secret
        payload: Raw request body bytes, exactly as received
        signature: X-Hub-Signature-256 header value ("sha256=<hex>")

    Returns:
        True if valid, False otherwise
    """
    if not signature:
        return False

    algorithm, _, digest = signature.partition("=")
    if algorithm != SIGNATURE_ALGORITHM or not digest:
        return False

    expected = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()

    # compare_digest treats a length difference as a mismatch without leaking where
    return hmac.compare_digest(expected.encode(), digest.encode("utf-8", "replace"))


def require_github_signature(secret: str, payload: bytes, signature: Optional[str]) -> None:
    """Verify GitHub signature or raise exception.

    Raises:
        AuthenticationError: If the signature is missing or invalid
    """
    if not signature:
        logger.warning("Missing GitHub webhook signature")
        raise AuthenticationError("Missing webhook signature")

    if not verify_github_signature(secret, payload, signature):
        logger.warning("Invalid GitHub webhook signature")
        raise AuthenticationError()
