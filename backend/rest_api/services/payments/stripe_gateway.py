"""
Stripe payment-intent client over httpx.

Only the two calls the marketplace needs: create an intent for an order
total and retrieve an intent to read its status. Stripe takes
form-encoded bodies with bracketed keys for nested fields.
"""

from typing import Any

import httpx

from shared.config.settings import settings
from shared.config.logging import payments_logger as logger
from shared.utils.exceptions import PaymentGatewayError


def _flatten_form(data: dict[str, Any], prefix: str = "") -> dict[str, str]:
    """{"metadata": {"orderId": 5}} -> {"metadata[orderId]": "5"}"""
    flat: dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}[{key}]" if prefix else key
        if isinstance(value, dict):
            flat.update(_flatten_form(value, name))
        elif isinstance(value, bool):
            flat[name] = "true" if value else "false"
        elif value is not None:
            flat[name] = str(value)
    return flat


class StripeGateway:
    """
    Thin async client for the Stripe PaymentIntents API.

    Usage:
        gateway = StripeGateway(secret_key="sk_test_...")
        intent = await gateway.create_payment_intent(3216, "usd", {"orderId": "1"})
    """

    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com/v1",
        timeout: float = 30.0,
    ):
        self._secret_key = secret_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self._secret_key:
            raise PaymentGatewayError(operation, reason="payment processor not configured")

        try:
            async with httpx.AsyncClient(base_url=self._api_base, timeout=self._timeout) as client:
                response = await client.request(
                    method,
                    path,
                    data=_flatten_form(data) if data else None,
                    auth=(self._secret_key, ""),
                )
        except httpx.HTTPError as e:
            raise PaymentGatewayError(operation, error=str(e))

        if response.status_code >= 400:
            try:
                error = response.json().get("error", {})
            except ValueError:
                error = {}
            raise PaymentGatewayError(
                operation,
                status_code_upstream=response.status_code,
                error_type=error.get("type"),
                error_message=error.get("message"),
            )

        return response.json()

    async def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict[str, str],
    ) -> dict[str, Any]:
        """Create an intent for `amount_cents` minor units."""
        intent = await self._request(
            "POST",
            "/payment_intents",
            "create payment intent",
            data={
                "amount": amount_cents,
                "currency": currency,
                "metadata": metadata,
                "automatic_payment_methods": {"enabled": True},
            },
        )
        logger.info("Payment intent created", payment_intent_id=intent.get("id"), amount_cents=amount_cents)
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"/payment_intents/{payment_intent_id}",
            "retrieve payment intent",
        )


def get_payment_gateway() -> StripeGateway:
    """FastAPI dependency; overridden in tests."""
    return StripeGateway(
        secret_key=settings.stripe_secret_key,
        api_base=settings.stripe_api_base,
        timeout=settings.stripe_timeout_seconds,
    )
