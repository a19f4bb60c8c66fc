"""
Stripe webhook signature verification.

Stripe sends:
- Stripe-Signature header: "t=timestamp,v1=signature[,v1=...]"

We compute HMAC-SHA256 of "{t}.{raw body}" with the endpoint secret and
compare with every v1 entry.
"""

import hashlib
import hmac
import time

from shared.config.logging import payments_logger as logger

SIGNATURE_SCHEME = "v1"


class WebhookSignatureError(Exception):
    """Signature header missing, malformed, stale or not matching."""


def parse_signature_header(header: str) -> tuple[int, list[str]]:
    timestamp: int | None = None
    signatures: list[str] = []
    for part in header.split(","):
        if "=" not in part:
            continue
        key, value = part.strip().split("=", 1)
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise WebhookSignatureError("Invalid timestamp in signature header")
        elif key == SIGNATURE_SCHEME:
            signatures.append(value)

    if timestamp is None or not signatures:
        raise WebhookSignatureError("Malformed signature header")
    return timestamp, signatures


def compute_signature(payload: bytes, timestamp: int, secret: str) -> str:
    signed_payload = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()


def verify_signature(
    payload: bytes,
    header: str | None,
    secret: str,
    tolerance_seconds: int = 300,
    now: int | None = None,
) -> None:
    """
    Raise WebhookSignatureError unless `header` signs `payload` with `secret`.

    A tolerance of 0 disables the timestamp age check.
    """
    if not header:
        raise WebhookSignatureError("Missing Stripe-Signature header")

    timestamp, signatures = parse_signature_header(header)
    expected = compute_signature(payload, timestamp, secret)

    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        logger.warning("Stripe webhook signature mismatch", expected=expected[:8])
        raise WebhookSignatureError("No signatures found matching the expected signature")

    current = int(time.time()) if now is None else now
    if tolerance_seconds > 0 and abs(current - timestamp) > tolerance_seconds:
        raise WebhookSignatureError("Timestamp outside the tolerance zone")
