"""
Order routers - /api/orders/*
Checkout, listings, status lifecycle, cancellation and rating.
"""

from .routes import router

__all__ = ["router"]
