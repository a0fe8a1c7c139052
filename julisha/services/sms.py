"""SMS dispatch for phone verification codes.

No gateway is integrated: dispatch is logged by hash prefix only and, in
demo mode, the verify-phone endpoint echoes the code to the caller instead.
"""

import logging

from flask import current_app

logger = logging.getLogger(__name__)


def demo_mode() -> bool:
    """Return True if codes should be returned in the API response."""
    return bool(current_app.config.get("SMS_DEMO_MODE", False))


def send_verification_code(phone_hash: str, code: str) -> None:
    """Hand a verification code to the SMS gateway (stub)."""
    logger.info("Verification code issued for %s (SMS dispatch stubbed)", phone_hash[:8])
