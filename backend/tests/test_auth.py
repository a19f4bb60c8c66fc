"""
Tests for authentication endpoints.
"""

import jwt
import pytest

from shared.config.settings import settings
from shared.security.auth import sign_jwt, verify_jwt
from shared.security.password import hash_password, needs_rehash, verify_password
from shared.utils.exceptions import NotAuthorizedError
from tests.conftest import TEST_PASSWORD, make_user


class TestPasswordHashing:
    """Test password hashing utilities."""

    def test_hash_password_returns_bcrypt_hash(self):
        """Hash should return bcrypt format."""
        hashed = hash_password("mypassword")
        assert hashed.startswith("$2b$")

    def test_verify_password_correct(self):
        hashed = hash_password("mypassword")
        assert verify_password("mypassword", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("mypassword")
        assert verify_password("wrongpassword", hashed) is False

    def test_plain_text_never_verifies(self):
        """Stored values that are not bcrypt hashes are rejected outright."""
        assert verify_password("plaintext", "plaintext") is False

    def test_needs_rehash(self):
        assert needs_rehash("plaintext") is True
        assert needs_rehash(hash_password("mypassword")) is False


class TestTokens:
    """JWT signing and verification."""

    def test_round_trip_claims(self):
        token = sign_jwt({"sub": "7", "role": "customer", "email": "a@b.com"})
        claims = verify_jwt(token)
        assert claims["sub"] == "7"
        assert claims["role"] == "customer"

    def test_expired_token(self):
        token = sign_jwt({"sub": "7", "role": "customer"}, ttl_seconds=-10)
        with pytest.raises(NotAuthorizedError):
            verify_jwt(token)

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": "7", "role": "customer", "iss": settings.jwt_issuer, "aud": settings.jwt_audience},
            "not-the-secret-at-all-not-the-secret",
            algorithm="HS256",
        )
        with pytest.raises(NotAuthorizedError):
            verify_jwt(token)

    def test_missing_role_claim(self):
        token = sign_jwt({"sub": "7"})
        with pytest.raises(NotAuthorizedError):
            verify_jwt(token)


class TestAuthEndpoints:
    """Test authentication API endpoints."""

    def test_register_customer(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "New Person", "email": "New@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["token"]
        assert data["tokenType"] == "Bearer"
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["role"] == "customer"
        assert "password" not in data["user"]

    def test_register_shop_owner(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Chef", "email": "chef@example.com", "password": "secret123", "role": "shop_owner"},
        )
        assert response.json()["user"]["role"] == "shop_owner"

    def test_register_admin_forbidden(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Sneaky", "email": "sneaky@example.com", "password": "secret123", "role": "admin"},
        )
        assert response.status_code == 400

    def test_register_duplicate_email(self, client, seed_customer):
        response = client.post(
            "/api/auth/register",
            json={"name": "Copy", "email": "customer@test.com", "password": "secret123"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User with this email already exists"

    def test_register_short_password(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Shorty", "email": "short@example.com", "password": "123"},
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    def test_login_success(self, client, seed_customer):
        """Valid credentials should return a token."""
        response = client.post(
            "/api/auth/login",
            json={"email": "customer@test.com", "password": TEST_PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "customer@test.com"
        assert data["expiresIn"] == settings.jwt_access_token_expire_minutes * 60

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.json()["data"]["id"] == seed_customer.id

    def test_login_invalid_password(self, client, seed_customer):
        response = client.post(
            "/api/auth/login",
            json={"email": "customer@test.com", "password": "wrongpassword"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_login_unknown_email(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "nobody@test.com", "password": TEST_PASSWORD},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_login_deactivated(self, client, db_session):
        make_user(db_session, "gone@test.com", "customer", is_active=False)

        response = client.post(
            "/api/auth/login",
            json={"email": "gone@test.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 401
        assert "deactivated" in response.json()["message"]

    def test_me_authenticated(self, client, customer_headers):
        response = client.get("/api/auth/me", headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "customer@test.com"

    def test_me_unauthenticated(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized to access this route"

    def test_me_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401

    def test_update_details(self, client, customer_headers):
        response = client.put(
            "/api/auth/update-details",
            json={"name": "Carla C.", "phone": "+15559998888"},
            headers=customer_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Carla C."
        assert response.json()["data"]["phone"] == "+15559998888"

    def test_update_details_email_taken(self, client, customer_headers, seed_owner):
        response = client.put(
            "/api/auth/update-details", json={"email": "owner@test.com"}, headers=customer_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Email already exists"

    def test_update_password(self, client, customer_headers):
        response = client.put(
            "/api/auth/update-password",
            json={"currentPassword": TEST_PASSWORD, "newPassword": "brandnew456"},
            headers=customer_headers,
        )
        assert response.status_code == 200
        assert response.json()["token"]

        login = client.post("/api/auth/login", json={"email": "customer@test.com", "password": "brandnew456"})
        assert login.status_code == 200

    def test_update_password_revokes_old_tokens(self, client, customer_headers):
        response = client.put(
            "/api/auth/update-password",
            json={"currentPassword": TEST_PASSWORD, "newPassword": "brandnew456"},
            headers=customer_headers,
        )
        fresh = {"Authorization": f"Bearer {response.json()['token']}"}

        assert client.get("/api/auth/me", headers=customer_headers).status_code == 401
        assert client.get("/api/auth/me", headers=fresh).status_code == 200

    def test_update_password_wrong_current(self, client, customer_headers):
        response = client.put(
            "/api/auth/update-password",
            json={"currentPassword": "nope-nope", "newPassword": "brandnew456"},
            headers=customer_headers,
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Current password is incorrect"


class TestLogout:
    """POST /api/auth/logout revokes every token issued so far."""

    def test_logout(self, client, customer_headers):
        response = client.post("/api/auth/logout", headers=customer_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully", "data": None}

    def test_token_rejected_after_logout(self, client, customer_headers):
        client.post("/api/auth/logout", headers=customer_headers)

        response = client.get("/api/auth/me", headers=customer_headers)

        assert response.status_code == 401

    def test_login_after_logout_works(self, client, customer_headers, seed_customer):
        client.post("/api/auth/logout", headers=customer_headers)

        login = client.post("/api/auth/login", json={"email": seed_customer.email, "password": TEST_PASSWORD})
        token = login.json()["token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["data"]["id"] == seed_customer.id

    def test_other_users_unaffected(self, client, customer_headers, other_customer_headers):
        client.post("/api/auth/logout", headers=customer_headers)
        assert client.get("/api/auth/me", headers=other_customer_headers).status_code == 200

    def test_logout_requires_token(self, client):
        assert client.post("/api/auth/logout").status_code == 401
