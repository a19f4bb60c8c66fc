"""
Payment routers - /api/payments/*
Stripe payment intents, confirmation and webhook.
"""

from .routes import router

__all__ = ["router"]
