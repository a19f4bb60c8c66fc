"""
User management routers - /api/users/*
Admin-only account lookup, edit and removal.
"""

from .routes import router

__all__ = ["router"]
