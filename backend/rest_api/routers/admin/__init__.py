"""
Admin routers - /api/admin/*
Dashboard, reports and shop/user/order administration.
"""

from .routes import router

__all__ = ["router"]
