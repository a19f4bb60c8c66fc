"""
Payment Services - payment processor integration.

Provides:
- StripeGateway: payment-intent create/retrieve over httpx
- Stripe webhook signature verification
"""

from .stripe_gateway import StripeGateway, get_payment_gateway
from .webhook import WebhookSignatureError, compute_signature, verify_signature

__all__ = [
    "StripeGateway",
    "get_payment_gateway",
    "WebhookSignatureError",
    "compute_signature",
    "verify_signature",
]
