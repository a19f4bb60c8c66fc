"""
Review routers - /api/reviews/*
"""

from .routes import router

__all__ = ["router"]
