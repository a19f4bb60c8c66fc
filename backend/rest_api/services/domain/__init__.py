"""
Domain Services - application layer.

Services hold the business rules and own the transaction; routers stay thin.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import OrderService

    # In router
    order = OrderService(db).create_order(user, body)
"""

from .pricing import PricedLine, PricingBreakdown, calculate_pricing, calculate_tax, price_line
from .shop_service import ShopFilters, ShopService
from .menu_service import MenuFilters, MenuService
from .order_service import OrderFilters, OrderService, generate_order_number
from .review_service import ReviewService
from .payment_service import PaymentResult, PaymentService
from .admin_service import AdminService, AdminShopFilters, AdminUserFilters

__all__ = [
    # Pricing
    "PricedLine",
    "PricingBreakdown",
    "calculate_pricing",
    "calculate_tax",
    "price_line",
    # Services
    "ShopService",
    "ShopFilters",
    "MenuService",
    "MenuFilters",
    "OrderService",
    "OrderFilters",
    "generate_order_number",
    "ReviewService",
    "PaymentService",
    "PaymentResult",
    "AdminService",
    "AdminShopFilters",
    "AdminUserFilters",
]
