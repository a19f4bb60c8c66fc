"""
CORS for the storefront and the shop dashboard.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings

# Local dev servers besides FRONTEND_URL
DEV_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:3000", "http://127.0.0.1:5173")


def cors_origins() -> list[str]:
    """ALLOWED_ORIGINS when set, else FRONTEND_URL (plus dev servers outside production)."""
    if settings.allowed_origins:
        return [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]

    origins = [settings.frontend_url]
    if settings.environment != "production":
        origins.extend(o for o in DEV_ORIGINS if o != settings.frontend_url)
    return origins


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Stripe-Signature", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=0 if settings.environment == "development" else 600,
    )
