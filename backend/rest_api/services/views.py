"""
Output views: ORM entities to response schemas.

Kept in one place so routers and services render entities the same way
(nested pricing / payment / rating blocks, shop rating summary, ...).
"""

from rest_api.models import MenuItem, Order, Review, Shop, User
from shared.utils.schemas import (
    AddOn,
    CancellationOutput,
    DeliveryTime,
    DiscountOutput,
    MenuItemOutput,
    OrderItemOutput,
    OrderOutput,
    OrderRatingOutput,
    PaymentInfoOutput,
    PricingOutput,
    ReviewOutput,
    ShopOutput,
    ShopRating,
    StatusHistoryOutput,
    UserOutput,
    Variant,
)


def user_view(user: User) -> UserOutput:
    return UserOutput.model_validate(user)


def shop_rating_view(shop: Shop) -> ShopRating:
    return ShopRating(
        average=shop.rating_average,
        food=shop.food_rating_average,
        delivery=shop.delivery_rating_average,
        count=shop.rating_count,
    )


def shop_view(shop: Shop) -> ShopOutput:
    return ShopOutput(
        id=shop.id,
        owner_id=shop.owner_id,
        name=shop.name,
        description=shop.description,
        category=shop.category,
        cuisine=list(shop.cuisine or []),
        address=shop.address,
        phone=shop.phone,
        email=shop.email,
        image=shop.image,
        delivery_fee_cents=shop.delivery_fee_cents,
        minimum_order_cents=shop.minimum_order_cents,
        delivery_time=DeliveryTime(min=shop.delivery_time_min, max=shop.delivery_time_max),
        rating=shop_rating_view(shop),
        is_active=shop.is_active,
        is_open=shop.is_open,
        featured=shop.featured,
        total_orders=shop.total_orders,
        tags=list(shop.tags or []),
        created_at=shop.created_at,
    )


def menu_item_view(item: MenuItem) -> MenuItemOutput:
    return MenuItemOutput(
        id=item.id,
        shop_id=item.shop_id,
        name=item.name,
        description=item.description,
        price_cents=item.price_cents,
        category=item.category,
        image=item.image,
        is_available=item.is_available,
        is_popular=item.is_popular,
        is_featured=item.is_featured,
        preparation_time=item.preparation_time,
        variants=[Variant.model_validate(v) for v in item.variants or []],
        add_ons=[AddOn.model_validate(a) for a in item.add_ons or []],
        total_orders=item.total_orders,
        tags=list(item.tags or []),
    )


def order_view(order: Order) -> OrderOutput:
    """Full order document with nested pricing, payment, history, rating and cancellation."""
    rating = None
    if order.is_rated:
        rating = OrderRatingOutput(
            food_rating=order.food_rating,
            delivery_rating=order.delivery_rating,
            overall_rating=order.overall_rating,
            review=order.rating_review,
            rated_at=order.rated_at,
        )

    cancellation = None
    if order.cancelled_at is not None:
        cancellation = CancellationOutput(
            reason=order.cancellation_reason,
            cancelled_by=order.cancelled_by,
            cancelled_at=order.cancelled_at,
            refund_amount_cents=order.cancellation_refund_cents,
        )

    return OrderOutput(
        id=order.id,
        order_number=order.order_number,
        customer_id=order.customer_id,
        shop_id=order.shop_id,
        shop_name=order.shop.name if order.shop else None,
        items=[
            OrderItemOutput(
                menu_item_id=item.menu_item_id,
                name=item.name,
                unit_price_cents=item.unit_price_cents,
                quantity=item.quantity,
                variant=item.variant,
                add_ons=list(item.add_ons or []),
                special_instructions=item.special_instructions,
                item_total_cents=item.item_total_cents,
            )
            for item in order.items
        ],
        delivery_address=order.delivery_address,
        contact_info=order.contact_info,
        special_instructions=order.special_instructions,
        pricing=PricingOutput(
            subtotal_cents=order.subtotal_cents,
            delivery_fee_cents=order.delivery_fee_cents,
            tax_cents=order.tax_cents,
            tip_cents=order.tip_cents,
            discount=DiscountOutput(
                amount_cents=order.discount_cents,
                coupon_code=order.coupon_code,
                description=order.discount_description,
            ),
            total_cents=order.total_cents,
        ),
        payment_info=PaymentInfoOutput(
            method=order.payment_method,
            status=order.payment_status,
            transaction_id=order.transaction_id,
            payment_intent_id=order.payment_intent_id,
            paid_at=order.paid_at,
            refunded_at=order.refunded_at,
            refund_amount_cents=order.refund_amount_cents,
        ),
        status=order.status,
        status_history=[
            StatusHistoryOutput(
                status=entry.status,
                timestamp=entry.timestamp,
                note=entry.note,
                updated_by=entry.updated_by_id,
            )
            for entry in order.status_history
        ],
        estimated_delivery_time=order.estimated_delivery_time,
        actual_delivery_time=order.actual_delivery_time,
        rating=rating,
        cancellation=cancellation,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def review_view(review: Review) -> ReviewOutput:
    return ReviewOutput(
        id=review.id,
        user_id=review.user_id,
        user_name=review.user.name if review.user else None,
        shop_id=review.shop_id,
        order_id=review.order_id,
        food_rating=review.food_rating,
        delivery_rating=review.delivery_rating,
        overall_rating=review.overall_rating,
        title=review.title,
        review=review.comment,
        created_at=review.created_at,
    )
