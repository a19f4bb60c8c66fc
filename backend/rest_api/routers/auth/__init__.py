"""
Authentication routers - /api/auth/*
Handles registration, login and the current user's profile.
"""

from .routes import router

__all__ = ["router"]
