"""Security helpers for webhook and service-account credentials."""

from __future__ import annotations

import base64
import hmac

from .config import WebhookPolicy
from .errors import AuthRejected


SECRET_HEADER = "X-SecretKey"


def secret_matches(received: str | None, expected: str) -> bool:
    """Byte-equality check of the received header against the configured secret."""
    if received is None:
        return False
    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))


def verify_webhook_secret(received: str | None, expected: str, policy: WebhookPolicy) -> None:
    """Raise AuthRejected unless the caller may use the webhook.

    With no configured secret the lenient policy lets every request through;
    the strict policy refuses them all.
    """
    if not expected:
        if policy.require_secret:
            raise AuthRejected("no webhook secret configured")
        return
    if not secret_matches(received, expected):
        raise AuthRejected("invalid or missing webhook secret")


def basic_credentials(key_id: str, secret: str) -> str:
    """Build the value of a Basic Authorization header."""
    raw = f"{key_id}:{secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")
