"""Verification-token check for inbound Slack webhook payloads."""

import os
import hmac
import logging
from typing import Optional
from src.utils.errors import ConfigurationError, VerificationError

logger = logging.getLogger(__name__)


def should_bypass_verification() -> bool:
    """Check if token verification should be bypassed (dev mode)."""
    env = os.environ.get("NODE_ENV", "").lower()
    if env in ("development", "local"):
        return True

    bypass_flag = os.environ.get("SLACK_BYPASS_VERIFY", "").lower()
    return bypass_flag == "true"


def get_verification_token() -> str:
    """Get the app's verification token from environment."""
    token = os.environ.get("SLACK_VERIFICATION_TOKEN", "").strip()
    if not token:
        raise ConfigurationError("SLACK_VERIFICATION_TOKEN not set")
    return token


def tokens_match(expected: str, received: Optional[str]) -> bool:
    if not expected or not received:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), str(received).encode("utf-8"))


def verify_slack_request(body: dict) -> None:
    """
    Raise VerificationError unless the payload carries the configured token.

    The error message is the exact text returned with the 403.
    """
    received = body.get("token") if isinstance(body, dict) else None

    if should_bypass_verification():
        logger.debug("Slack token verification bypassed (dev mode)")
        return

    expected = get_verification_token()
    if not tokens_match(expected, received):
        logger.warning(f"Verification token mismatch - has_token={bool(received)}")
        raise VerificationError(f"Invalid Slack verification token received: {received or ''}")
