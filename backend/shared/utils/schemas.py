"""
Shared Pydantic schemas used across the application.

JSON on the wire is camelCase (alias generation); Python code uses
snake_case. Money fields are integer cents.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from shared.config.constants import Limits
from shared.utils.validators import validate_image_url


# =============================================================================
# Common Types
# =============================================================================

Role = Literal["customer", "shop_owner", "admin"]
SelfRegisterRole = Literal["customer", "shop_owner"]
OrderStatus = Literal[
    "placed", "confirmed", "preparing", "ready_for_pickup",
    "out_for_delivery", "delivered", "cancelled", "refunded",
]
PaymentMethod = Literal["card", "cash", "digital_wallet"]
PaymentStatus = Literal["pending", "completed", "failed", "refunded"]
CancelledBy = Literal["customer", "shop", "admin"]
ShopCategory = Literal[
    "Fast Food", "Restaurant", "Cafe", "Bakery", "Pizza", "Chinese",
    "Indian", "Italian", "Mexican", "Thai", "Japanese", "American",
    "Desserts", "Healthy", "Vegetarian", "Other",
]
MenuCategory = Literal[
    "Appetizers", "Main Course", "Desserts", "Beverages", "Salads",
    "Soups", "Sandwiches", "Burgers", "Pizza", "Pasta", "Rice",
    "Noodles", "Seafood", "Chicken", "Beef", "Pork", "Vegetarian",
    "Vegan", "Sides", "Breakfast", "Lunch", "Dinner", "Snacks", "Other",
]

RatingValue = Annotated[int, Field(ge=Limits.MIN_RATING, le=Limits.MAX_RATING)]
ImageUrl = Annotated[str | None, AfterValidator(validate_image_url)]

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either form on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Response Envelopes
# =============================================================================


class ApiResponse(CamelModel, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class PageInfo(CamelModel):
    """Pagination metadata; next/prev are page numbers or null."""

    page: int
    limit: int
    pages: int
    next: int | None = None
    prev: int | None = None


class PaginatedResponse(CamelModel, Generic[T]):
    """Envelope for paginated listings."""

    success: bool = True
    count: int
    total: int
    pagination: PageInfo
    data: list[T]


class ListResponse(CamelModel, Generic[T]):
    """Unpaginated listing with its size."""

    success: bool = True
    count: int
    data: list[T]


class ErrorResponse(CamelModel):
    """Error envelope produced by the exception handlers."""

    success: bool = False
    message: str
    errors: list[dict[str, Any]] | None = None


# =============================================================================
# Addresses & Contact
# =============================================================================


class Coordinates(CamelModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Address(CamelModel):
    street: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(min_length=1, max_length=20)
    coordinates: Coordinates | None = None


class DeliveryAddress(Address):
    delivery_instructions: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)


class ContactInfo(CamelModel):
    phone: str = Field(min_length=5, max_length=30)
    email: EmailStr | None = None


# =============================================================================
# Authentication Schemas
# =============================================================================


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    email: EmailStr
    password: str = Field(min_length=Limits.MIN_PASSWORD_LENGTH, max_length=128)
    role: SelfRegisterRole = "customer"
    phone: str | None = Field(default=None, max_length=30)
    address: Address | None = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UpdateDetailsRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    address: Address | None = None


class AdminUserUpdate(UpdateDetailsRequest):
    """Admin edit of any account; only the fields sent are changed."""

    role: Role | None = None
    is_active: bool | None = None
    email_verified: bool | None = None


class UpdatePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=Limits.MIN_PASSWORD_LENGTH, max_length=128)


class UserOutput(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    phone: str | None = None
    address: dict[str, Any] | None = None
    is_active: bool
    email_verified: bool
    created_at: datetime | None = None


class AuthResponse(CamelModel):
    """Token plus the authenticated user."""

    success: bool = True
    token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserOutput


# =============================================================================
# Shop Schemas
# =============================================================================


class DeliveryTime(CamelModel):
    """Delivery window in minutes."""

    min: int = Field(ge=0, le=600)
    max: int = Field(ge=0, le=600)

    @model_validator(mode="after")
    def _check_window(self) -> "DeliveryTime":
        if self.max < self.min:
            raise ValueError("deliveryTime.max must be greater than or equal to deliveryTime.min")
        return self


class ShopCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    category: ShopCategory
    cuisine: list[str] = Field(default_factory=list)
    address: Address
    phone: str = Field(min_length=5, max_length=30)
    email: EmailStr | None = None
    image: ImageUrl = None
    delivery_fee_cents: int = Field(default=0, ge=0, le=Limits.MAX_PRICE_CENTS)
    minimum_order_cents: int = Field(default=0, ge=0, le=Limits.MAX_PRICE_CENTS)
    delivery_time: DeliveryTime = Field(default_factory=lambda: DeliveryTime(min=30, max=45))
    is_open: bool = True
    tags: list[str] = Field(default_factory=list)


class ShopUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    category: ShopCategory | None = None
    cuisine: list[str] | None = None
    address: Address | None = None
    phone: str | None = Field(default=None, min_length=5, max_length=30)
    email: EmailStr | None = None
    image: ImageUrl = None
    delivery_fee_cents: int | None = Field(default=None, ge=0, le=Limits.MAX_PRICE_CENTS)
    minimum_order_cents: int | None = Field(default=None, ge=0, le=Limits.MAX_PRICE_CENTS)
    delivery_time: DeliveryTime | None = None
    is_open: bool | None = None
    tags: list[str] | None = None


class ShopRating(CamelModel):
    average: float
    food: float
    delivery: float
    count: int


class ShopOutput(CamelModel):
    id: int
    owner_id: int
    name: str
    description: str | None = None
    category: str
    cuisine: list[str]
    address: dict[str, Any]
    phone: str
    email: str | None = None
    image: str | None = None
    delivery_fee_cents: int
    minimum_order_cents: int
    delivery_time: DeliveryTime
    rating: ShopRating
    is_active: bool
    is_open: bool
    featured: bool
    total_orders: int
    tags: list[str]
    created_at: datetime | None = None


class NearbyShopOutput(ShopOutput):
    distance_km: float


class ShopStats(CamelModel):
    shop_id: int
    total_orders: int
    revenue_cents: int
    menu_items_count: int
    orders_by_status: dict[str, int]
    rating: ShopRating
    recent_orders: list["OrderOutput"]


# =============================================================================
# Menu Schemas
# =============================================================================


class Variant(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    description: str | None = None


class AddOn(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    category: str | None = None


class MenuItemCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    category: MenuCategory
    image: ImageUrl = None
    is_available: bool = True
    is_popular: bool = False
    is_featured: bool = False
    preparation_time: int = Field(default=15, ge=0, le=600)
    variants: list[Variant] = Field(default_factory=list)
    add_ons: list[AddOn] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class MenuItemUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price_cents: int | None = Field(default=None, ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    category: MenuCategory | None = None
    image: ImageUrl = None
    is_available: bool | None = None
    is_popular: bool | None = None
    is_featured: bool | None = None
    preparation_time: int | None = Field(default=None, ge=0, le=600)
    variants: list[Variant] | None = None
    add_ons: list[AddOn] | None = None
    tags: list[str] | None = None


class MenuItemOutput(CamelModel):
    id: int
    shop_id: int
    name: str
    description: str | None = None
    price_cents: int
    category: str
    image: str | None = None
    is_available: bool
    is_popular: bool
    is_featured: bool
    preparation_time: int
    variants: list[Variant]
    add_ons: list[AddOn]
    total_orders: int
    tags: list[str]


# =============================================================================
# Order Schemas
# =============================================================================


class OrderLineInput(CamelModel):
    """One requested cart line."""

    menu_item_id: int = Field(gt=0)
    quantity: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)
    variant: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    add_ons: list[str] = Field(default_factory=list)
    special_instructions: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)


class PaymentInfoInput(CamelModel):
    method: PaymentMethod


class CreateOrderRequest(CamelModel):
    """
    Checkout body: {shop, items[], deliveryAddress, contactInfo, paymentInfo, tip?}.

    `tip` is a currency amount (5 or 2.50) and is stored as cents; `tipCents`
    is accepted as well. Sending both with different values is rejected.
    """

    shop: int = Field(gt=0)
    items: list[OrderLineInput] = Field(min_length=1)
    delivery_address: DeliveryAddress
    contact_info: ContactInfo
    payment_info: PaymentInfoInput
    tip: Decimal | None = Field(default=None, ge=0, le=Limits.MAX_PRICE_CENTS // 100, decimal_places=2)
    tip_cents: int = Field(default=0, ge=0, le=Limits.MAX_PRICE_CENTS)
    special_instructions: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)

    @model_validator(mode="after")
    def _tip_to_cents(self) -> "CreateOrderRequest":
        if self.tip is None:
            return self
        cents = int(self.tip * 100)
        if "tip_cents" in self.model_fields_set and self.tip_cents != cents:
            raise ValueError("tip and tipCents disagree")
        self.tip_cents = cents
        return self


class UpdateOrderStatusRequest(CamelModel):
    status: OrderStatus
    note: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)


class CancelOrderRequest(CamelModel):
    reason: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)


class RatingInput(CamelModel):
    food_rating: RatingValue
    delivery_rating: RatingValue
    overall_rating: RatingValue


class RateOrderRequest(CamelModel):
    rating: RatingInput
    review: str | None = Field(default=None, max_length=Limits.MAX_REVIEW_TEXT_LENGTH)


class OrderItemOutput(CamelModel):
    menu_item_id: int | None = None
    name: str
    unit_price_cents: int
    quantity: int
    variant: Variant | None = None
    add_ons: list[AddOn]
    special_instructions: str | None = None
    item_total_cents: int


class DiscountOutput(CamelModel):
    amount_cents: int
    coupon_code: str | None = None
    description: str | None = None


class PricingOutput(CamelModel):
    subtotal_cents: int
    delivery_fee_cents: int
    tax_cents: int
    tip_cents: int
    discount: DiscountOutput
    total_cents: int


class PaymentInfoOutput(CamelModel):
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: str | None = None
    payment_intent_id: str | None = None
    paid_at: datetime | None = None
    refunded_at: datetime | None = None
    refund_amount_cents: int | None = None


class StatusHistoryOutput(CamelModel):
    status: OrderStatus
    timestamp: datetime
    note: str | None = None
    updated_by: int | None = None


class OrderRatingOutput(CamelModel):
    food_rating: int
    delivery_rating: int
    overall_rating: int
    review: str | None = None
    rated_at: datetime


class CancellationOutput(CamelModel):
    reason: str | None = None
    cancelled_by: CancelledBy | None = None
    cancelled_at: datetime | None = None
    refund_amount_cents: int | None = None


class OrderOutput(CamelModel):
    id: int
    order_number: str
    customer_id: int
    shop_id: int
    shop_name: str | None = None
    items: list[OrderItemOutput]
    delivery_address: dict[str, Any]
    contact_info: dict[str, Any]
    special_instructions: str | None = None
    pricing: PricingOutput
    payment_info: PaymentInfoOutput
    status: OrderStatus
    status_history: list[StatusHistoryOutput]
    estimated_delivery_time: datetime | None = None
    actual_delivery_time: datetime | None = None
    rating: OrderRatingOutput | None = None
    cancellation: CancellationOutput | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# =============================================================================
# Review Schemas
# =============================================================================


class ReviewCreate(CamelModel):
    order: int = Field(gt=0)
    food_rating: RatingValue
    delivery_rating: RatingValue
    overall_rating: RatingValue
    title: str = Field(min_length=1, max_length=Limits.MAX_REVIEW_TITLE_LENGTH)
    review: str = Field(min_length=1, max_length=Limits.MAX_REVIEW_TEXT_LENGTH)


class ReviewOutput(CamelModel):
    id: int
    user_id: int
    user_name: str | None = None
    shop_id: int
    order_id: int
    food_rating: int
    delivery_rating: int
    overall_rating: int
    title: str | None = None
    review: str | None = None
    created_at: datetime | None = None


# =============================================================================
# Payment Schemas
# =============================================================================


class CreatePaymentIntentRequest(CamelModel):
    order_id: int = Field(gt=0)


class PaymentIntentOutput(CamelModel):
    client_secret: str | None = None
    payment_intent_id: str
    amount_cents: int
    currency: str


class ConfirmPaymentRequest(CamelModel):
    payment_intent_id: str = Field(min_length=1)
    order_id: int = Field(gt=0)


class WebhookAck(BaseModel):
    received: bool = True


ShopStats.model_rebuild()
