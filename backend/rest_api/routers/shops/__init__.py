"""
Shop routers - /api/shops/*
Public browsing, owner shop management, stats and shop reviews.
"""

from .routes import router

__all__ = ["router"]
