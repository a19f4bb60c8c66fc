"""
Tests for middlewares, error envelopes and request correlation.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from rest_api.core.exception_handlers import register_exception_handlers
from rest_api.core.middlewares import (
    ContentTypeValidationMiddleware,
    SecurityHeadersMiddleware,
    register_middlewares,
)
from shared.config.settings import settings
from shared.infrastructure.correlation import (
    CorrelationIdFilter,
    CorrelationIdMiddleware,
    get_request_id,
    request_id_var,
)
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import BusinessRuleError


class TestSecurityHeaders:
    """Headers added to every response of the real app."""

    def test_headers_present(self, client):
        response = client.get("/api/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "frame-ancestors 'none'" in response.headers["Content-Security-Policy"]

    def test_hsts_only_in_production(self, monkeypatch):
        app = FastAPI()
        app.add_middleware(SecurityHeadersMiddleware)

        @app.get("/ping")
        def ping():
            return {"ok": True}

        client = TestClient(app)
        assert "Strict-Transport-Security" not in client.get("/ping").headers

        monkeypatch.setattr(settings, "environment", "production")
        assert client.get("/ping").headers["Strict-Transport-Security"].startswith("max-age=")

    def test_server_header_stripped(self):
        app = FastAPI()
        app.add_middleware(SecurityHeadersMiddleware)

        @app.get("/branded")
        def branded():
            return JSONResponse({"ok": True}, headers={"Server": "uvicorn"})

        @app.get("/plain")
        def plain():
            return {"ok": True}

        client = TestClient(app)
        branded_response = client.get("/branded")
        assert branded_response.status_code == 200
        assert "server" not in branded_response.headers
        assert branded_response.headers["X-Frame-Options"] == "DENY"

        plain_response = client.get("/plain")
        assert plain_response.status_code == 200
        assert plain_response.json() == {"ok": True}


class TestContentTypeValidation:
    """Bodies must be JSON."""

    @pytest.fixture
    def app_client(self):
        app = FastAPI()
        app.add_middleware(ContentTypeValidationMiddleware)

        @app.post("/api/things")
        def create_thing():
            return {"ok": True}

        @app.post("/api/payments/webhook")
        def webhook():
            return {"received": True}

        return TestClient(app)

    def test_json_allowed(self, app_client):
        response = app_client.post("/api/things", json={"a": 1})
        assert response.status_code == 200

    def test_form_rejected(self, app_client):
        response = app_client.post("/api/things", data={"a": "1"})
        assert response.status_code == 415
        assert response.json()["success"] is False

    def test_webhook_exempt(self, app_client):
        response = app_client.post(
            "/api/payments/webhook", content=b"raw", headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == 200

    def test_real_app_rejects_plain_text(self, client, customer_headers):
        response = client.post(
            "/api/orders",
            content=b"shop=1",
            headers={**customer_headers, "Content-Type": "text/plain"},
        )
        assert response.status_code == 415


class TestErrorEnvelope:
    """Every failure answers {success: false, message, errors?}."""

    @pytest.fixture
    def app_client(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/rule")
        def broken_rule():
            raise BusinessRuleError("Nope")

        @app.get("/boom")
        def boom():
            raise RuntimeError("kaboom")

        return TestClient(app, raise_server_exceptions=False)

    def test_app_exception(self, app_client):
        response = app_client.get("/rule")
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Nope"}

    def test_unhandled_exception_is_generic(self, app_client):
        response = app_client.get("/boom")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server Error"}

    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestCorrelationId:
    """X-Request-ID propagation."""

    @pytest.fixture
    def app_client(self):
        app = FastAPI()
        app.add_middleware(CorrelationIdMiddleware)

        @app.get("/id")
        def current_id():
            return {"request_id": get_request_id()}

        return TestClient(app)

    def test_generated_when_missing(self, app_client):
        response = app_client.get("/id")
        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 36
        assert response.json()["request_id"] == request_id

    def test_provided_id_echoed(self, app_client):
        response = app_client.get("/id", headers={"X-Request-ID": "order-trace-1"})
        assert response.headers["X-Request-ID"] == "order-trace-1"

    def test_malformed_id_replaced(self, app_client):
        response = app_client.get("/id", headers={"X-Request-ID": "bad id\twith spaces"})
        request_id = response.headers["X-Request-ID"]
        assert request_id != "bad id\twith spaces"
        assert len(request_id) == 36

    def test_log_filter(self):
        token = request_id_var.set("abc-123")
        try:
            record = MagicMock()
            assert CorrelationIdFilter().filter(record) is True
            assert record.request_id == "abc-123"
        finally:
            request_id_var.reset(token)

    def test_log_filter_without_request(self):
        record = MagicMock()
        CorrelationIdFilter().filter(record)
        assert record.request_id == "-"


class TestSafeCommit:
    """Commit or roll back and re-raise."""

    def test_commits(self):
        db = MagicMock()
        safe_commit(db)
        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_rolls_back_and_reraises(self):
        db = MagicMock()
        db.commit.side_effect = ValueError("constraint")
        with pytest.raises(ValueError, match="constraint"):
            safe_commit(db)
        db.rollback.assert_called_once()


def test_register_middlewares():
    app = FastAPI()
    register_middlewares(app)
    classes = [m.cls for m in app.user_middleware]
    assert SecurityHeadersMiddleware in classes
    assert ContentTypeValidationMiddleware in classes
    assert CorrelationIdMiddleware in classes
