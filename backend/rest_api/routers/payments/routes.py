"""
Payments router.
Stripe payment intents, client-side confirmation and the Stripe webhook.

The order total is the only amount ever charged; clients never send one.
"""

import json

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from sqlalchemy.orm import Session

from shared.config.constants import Roles
from shared.config.logging import payments_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.infrastructure.events import PAYMENT_RECEIVED
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import (
    ApiResponse,
    ConfirmPaymentRequest,
    CreatePaymentIntentRequest,
    OrderOutput,
    PaymentIntentOutput,
    WebhookAck,
)
from rest_api.models import User
from rest_api.routers._common import current_user, require_roles
from rest_api.services.domain import PaymentService
from rest_api.services.events import schedule_order_event
from rest_api.services.payments import (
    StripeGateway,
    WebhookSignatureError,
    get_payment_gateway,
    verify_signature,
)
from rest_api.services.views import order_view


router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("/create-payment-intent", response_model=ApiResponse[PaymentIntentOutput])
async def create_payment_intent(
    body: CreatePaymentIntentRequest,
    user: User = Depends(require_roles(Roles.CUSTOMER)),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> ApiResponse[PaymentIntentOutput]:
    """Create a Stripe payment intent for one of the caller's orders."""
    intent = await PaymentService(db, gateway).create_payment_intent(user, body.order_id)
    return ApiResponse(data=intent)


@router.post("/confirm-payment", response_model=ApiResponse[OrderOutput])
async def confirm_payment(
    body: ConfirmPaymentRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> ApiResponse[OrderOutput]:
    """
    Record a payment the client completed with Stripe.

    Repeating the call, or racing the webhook, leaves the order unchanged.
    """
    result = await PaymentService(db, gateway).confirm_payment(user, body)
    if result.changed:
        schedule_order_event(background_tasks, PAYMENT_RECEIVED, result.order,
                             actor_user_id=user.id, actor_role=user.role)
    return ApiResponse(message="Payment confirmed successfully", data=order_view(result.order))


def _verify_webhook(payload: bytes, stripe_signature: str | None) -> None:
    if not settings.stripe_webhook_secret:
        if settings.environment == "production":
            raise ValidationError("Webhook signature verification failed: no secret configured")
        # Development only
        logger.warning("Stripe webhook signature verification skipped - no secret configured")
        return

    try:
        verify_signature(
            payload,
            stripe_signature,
            settings.stripe_webhook_secret,
            tolerance_seconds=settings.stripe_webhook_tolerance_seconds,
        )
    except WebhookSignatureError as e:
        raise ValidationError(f"Webhook signature verification failed: {e}")


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
) -> WebhookAck:
    """
    Stripe event callback.

    The signature is checked against the raw body before anything is parsed.
    Unknown event types are acknowledged and ignored.
    """
    payload = await request.body()
    _verify_webhook(payload, stripe_signature)

    try:
        event = json.loads(payload)
    except ValueError:
        raise ValidationError("Invalid JSON payload")
    if not isinstance(event, dict):
        raise ValidationError("Invalid JSON payload")

    logger.info("Stripe webhook received", event_type=event.get("type"), event_id=event.get("id"))

    result = PaymentService(db, gateway).handle_webhook_event(event)
    if result.changed and result.order is not None and result.order.is_paid:
        schedule_order_event(background_tasks, PAYMENT_RECEIVED, result.order)

    return WebhookAck()
