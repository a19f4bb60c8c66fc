"""
Menu routers - /api/shops/{shop_id}/menu/*
"""

from .routes import router

__all__ = ["router"]
