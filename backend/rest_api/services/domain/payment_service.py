"""
Payment Domain Service.

Records payment processor results on orders. Two independent paths can
report the same success (client confirmation and webhook); both end in
OrderService.mark_paid, which is idempotent.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.config.constants import STRIPE_INTENT_SUCCEEDED, OrderStatus, StripeEvent
from shared.config.logging import payments_logger as logger
from shared.config.settings import settings
from shared.utils.exceptions import BusinessRuleError, ValidationError
from shared.utils.schemas import ConfirmPaymentRequest, PaymentIntentOutput
from rest_api.models import Order, User
from rest_api.services.payments import StripeGateway
from .order_service import OrderService


@dataclass
class PaymentResult:
    order: Order | None
    changed: bool


class PaymentService:
    """
    Usage:
        service = PaymentService(db, gateway)
        intent = await service.create_payment_intent(user, order_id)
    """

    def __init__(self, db: Session, gateway: StripeGateway):
        self._db = db
        self._gateway = gateway
        self._orders = OrderService(db)

    async def create_payment_intent(self, user: User, order_id: int) -> PaymentIntentOutput:
        """
        Create an intent for the order's stored total.

        The amount is never taken from the client.
        """
        order = self._orders.get_order_for_payment(order_id, user)
        if order.is_paid:
            raise BusinessRuleError("Order has already been paid", order_id=order.id)
        if order.status == OrderStatus.CANCELLED:
            raise BusinessRuleError("Cannot pay for a cancelled order", order_id=order.id)

        currency = settings.default_currency
        intent = await self._gateway.create_payment_intent(
            amount_cents=order.total_cents,
            currency=currency,
            metadata={"orderId": str(order.id), "customerId": str(user.id)},
        )
        self._orders.attach_payment_intent(order, intent["id"])

        return PaymentIntentOutput(
            client_secret=intent.get("client_secret"),
            payment_intent_id=intent["id"],
            amount_cents=order.total_cents,
            currency=currency,
        )

    async def confirm_payment(self, user: User, request: ConfirmPaymentRequest) -> PaymentResult:
        """
        Client-side confirmation: read the intent from the processor and
        record it when it succeeded.
        """
        order = self._orders.get_order_for_payment(request.order_id, user)
        intent = await self._gateway.retrieve_payment_intent(request.payment_intent_id)

        metadata_order_id = (intent.get("metadata") or {}).get("orderId")
        if metadata_order_id is None or str(metadata_order_id) != str(order.id):
            raise ValidationError(
                "Payment intent does not belong to this order",
                order_id=order.id,
                payment_intent_id=request.payment_intent_id,
            )

        intent_status = intent.get("status")
        if intent_status != STRIPE_INTENT_SUCCEEDED:
            raise ValidationError(
                "Payment not successful",
                errors=[{"field": "paymentStatus", "message": str(intent_status)}],
                order_id=order.id,
            )

        changed = self._orders.mark_paid(order, transaction_id=intent["id"])
        return PaymentResult(order=order, changed=changed)

    def _order_from_intent(self, intent: dict[str, Any]) -> Order | None:
        raw_id = (intent.get("metadata") or {}).get("orderId")
        try:
            order_id = int(raw_id)
        except (TypeError, ValueError):
            logger.warning("Webhook intent without order reference", payment_intent_id=intent.get("id"))
            return None

        order = self._db.scalar(select(Order).where(Order.id == order_id))
        if order is None:
            logger.warning("Webhook references unknown order", order_id=order_id)
        return order

    def handle_webhook_event(self, event: dict[str, Any]) -> PaymentResult:
        """
        Apply a verified webhook event.

        Unknown event types and unknown orders are acknowledged without effect.
        """
        event_type = event.get("type")
        intent = (event.get("data") or {}).get("object") or {}

        if event_type == StripeEvent.PAYMENT_SUCCEEDED:
            order = self._order_from_intent(intent)
            if order is None:
                return PaymentResult(order=None, changed=False)
            changed = self._orders.mark_paid(order, transaction_id=intent.get("id", ""))
            return PaymentResult(order=order, changed=changed)

        if event_type == StripeEvent.PAYMENT_FAILED:
            order = self._order_from_intent(intent)
            if order is None:
                return PaymentResult(order=None, changed=False)
            changed = self._orders.mark_payment_failed(order)
            return PaymentResult(order=order, changed=changed)

        logger.info("Unhandled webhook event type", event_type=event_type)
        return PaymentResult(order=None, changed=False)
