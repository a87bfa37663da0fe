"""
WhatsApp Signature Verification

SECURITY BOUNDARY - Verify Meta HMAC signature and subscription token.
No network calls. No retries.
"""

import hashlib
import hmac
from typing import Mapping, Optional

SIGNATURE_HEADER = "X-Hub-Signature-256"


class SignatureVerificationError(Exception):
    """Signature verification failed."""
    pass


class ChallengeVerificationError(Exception):
    """Webhook subscription challenge rejected."""
    pass


def compute_signature(body: bytes, app_secret: str) -> str:
    """Signature Meta sends for `body`: 'sha256=' + hex HMAC-SHA256."""
    return "sha256=" + hmac.new(
        key=app_secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256
    ).hexdigest()


def verify_signature(
    headers: Mapping[str, str],
    body: bytes,
    app_secret: str,
) -> None:
    """
    Verify Meta HMAC-SHA256 signature on a WhatsApp webhook.

    WhatsApp sends:
    - X-Hub-Signature-256 header with HMAC
    - Request body

    We compute HMAC(body, app_secret) and compare.

    Args:
        headers: Request headers (case-insensitive mapping in FastAPI)
        body: Raw request body bytes
        app_secret: Meta app secret

    Raises:
        SignatureVerificationError: Missing or invalid signature
    """

    signature = headers.get(SIGNATURE_HEADER)
    if not signature:
        raise SignatureVerificationError(f"Missing {SIGNATURE_HEADER} header")

    expected_signature = compute_signature(body, app_secret)

    # Constant-time comparison
    if not hmac.compare_digest(signature.encode("utf-8"), expected_signature.encode("utf-8")):
        raise SignatureVerificationError("Invalid signature")


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_verify_token: Optional[str],
    hub_challenge: Optional[str],
    expected_token: Optional[str],
) -> str:
    """
    Verify webhook subscription challenge from WhatsApp.

    WhatsApp calls GET /webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    We verify the token and echo back the challenge.

    Returns:
        The challenge string to echo back

    Raises:
        ChallengeVerificationError: Wrong mode, wrong token, or no token configured
    """

    if hub_mode != "subscribe":
        raise ChallengeVerificationError("Invalid hub.mode")

    if not expected_token or hub_verify_token is None:
        raise ChallengeVerificationError("Invalid hub.verify_token")

    if not hmac.compare_digest(hub_verify_token.encode("utf-8"), expected_token.encode("utf-8")):
        raise ChallengeVerificationError("Invalid hub.verify_token")

    return hub_challenge or ""
