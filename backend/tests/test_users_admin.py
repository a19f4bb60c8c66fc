"""
Tests for admin account management under /api/users.
"""

import pytest

from tests.conftest import make_user
from shared.config.constants import Roles


class TestUsersAccess:
    """Only admins manage accounts."""

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_non_admin_rejected(self, client, owner_headers, seed_customer, method):
        kwargs = {"json": {"name": "X"}} if method == "put" else {}
        response = getattr(client, method)(
            f"/api/users/{seed_customer.id}", headers=owner_headers, **kwargs
        )
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_anonymous_rejected(self, client, seed_customer):
        assert client.get("/api/users").status_code == 401


class TestGetUser:
    """GET /api/users and /api/users/{id}"""

    def test_get_user(self, client, admin_headers, seed_customer):
        response = client.get(f"/api/users/{seed_customer.id}", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == "customer@test.com"
        assert data["role"] == "customer"
        assert data["isActive"] is True
        assert "password" not in data

    def test_missing_user(self, client, admin_headers):
        response = client.get("/api/users/4040", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User 4040 not found"}

    def test_list_filters_by_role(self, client, admin_headers, seed_customer, seed_owner):
        body = client.get("/api/users?role=shop_owner", headers=admin_headers).json()
        assert body["total"] == 1
        assert [u["email"] for u in body["data"]] == ["owner@test.com"]


class TestUpdateUser:
    """PUT /api/users/{id}"""

    def test_partial_update(self, client, admin_headers, seed_customer):
        response = client.put(
            f"/api/users/{seed_customer.id}",
            json={"name": "Carla Renamed", "phone": "555-0100", "emailVerified": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "User updated successfully"
        data = response.json()["data"]
        assert data["name"] == "Carla Renamed"
        assert data["phone"] == "555-0100"
        assert data["emailVerified"] is True
        assert data["email"] == "customer@test.com"
        assert data["role"] == "customer"

    def test_promote_customer(self, client, admin_headers, seed_customer):
        response = client.put(
            f"/api/users/{seed_customer.id}", json={"role": "shop_owner"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "shop_owner"

    def test_email_normalized_and_unique(self, client, admin_headers, seed_customer, seed_owner):
        taken = client.put(
            f"/api/users/{seed_customer.id}", json={"email": "OWNER@test.com"}, headers=admin_headers
        )
        assert taken.status_code == 400
        assert taken.json()["message"] == "Email already exists"

        changed = client.put(
            f"/api/users/{seed_customer.id}", json={"email": "Carla@Test.com"}, headers=admin_headers
        )
        assert changed.status_code == 200
        assert changed.json()["data"]["email"] == "carla@test.com"

    def test_invalid_role_rejected(self, client, admin_headers, seed_customer):
        response = client.put(
            f"/api/users/{seed_customer.id}", json={"role": "superuser"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_cannot_change_own_role(self, client, admin_headers, seed_admin):
        response = client.put(
            f"/api/users/{seed_admin.id}", json={"role": "customer"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot change the role or status of your own account"

    def test_can_edit_own_name(self, client, admin_headers, seed_admin):
        response = client.put(
            f"/api/users/{seed_admin.id}", json={"name": "Ada Lovelace"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"

    def test_owner_with_shops_keeps_role(self, client, admin_headers, seed_owner, seed_shop):
        response = client.put(
            f"/api/users/{seed_owner.id}", json={"role": "customer"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User still owns shops and must keep a shop owner role"

    def test_deactivate_locks_user_out(self, client, admin_headers, seed_customer, customer_headers):
        response = client.put(
            f"/api/users/{seed_customer.id}", json={"isActive": False}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["isActive"] is False
        assert client.get("/api/auth/me", headers=customer_headers).status_code == 401


class TestDeleteUser:
    """DELETE /api/users/{id}"""

    def test_delete_user_without_history(self, client, db_session, admin_headers):
        user = make_user(db_session, "fresh@test.com", Roles.CUSTOMER)

        response = client.delete(f"/api/users/{user.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User deleted successfully", "data": None}
        assert client.get(f"/api/users/{user.id}", headers=admin_headers).status_code == 404

    def test_customer_with_orders_kept(self, client, admin_headers, seed_customer, place_order):
        place_order()

        response = client.delete(f"/api/users/{seed_customer.id}", headers=admin_headers)

        assert response.status_code == 400
        assert "deactivate the account instead" in response.json()["message"]
        assert client.get(f"/api/users/{seed_customer.id}", headers=admin_headers).status_code == 200

    def test_owner_with_shop_kept(self, client, admin_headers, seed_owner, seed_shop):
        response = client.delete(f"/api/users/{seed_owner.id}", headers=admin_headers)
        assert response.status_code == 400

    def test_cannot_delete_self(self, client, admin_headers, seed_admin):
        response = client.delete(f"/api/users/{seed_admin.id}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete your own account"

    def test_delete_missing_user(self, client, admin_headers):
        assert client.delete("/api/users/4040", headers=admin_headers).status_code == 404
