"""
Tests for admin endpoints: reports, activation toggles and listings.
"""

import pytest

from tests.conftest import auth_headers_for, make_shop


@pytest.fixture
def paid_order(client, place_order, customer_headers, fake_gateway):
    """Reference-cart order paid through the confirmation path."""
    order = place_order()
    intent = client.post(
        "/api/payments/create-payment-intent", json={"orderId": order["id"]}, headers=customer_headers
    ).json()["data"]
    fake_gateway.succeed(intent["paymentIntentId"])
    response = client.post(
        "/api/payments/confirm-payment",
        json={"orderId": order["id"], "paymentIntentId": intent["paymentIntentId"]},
        headers=customer_headers,
    )
    assert response.status_code == 200
    return response.json()["data"]


class TestAdminAccess:
    """Every admin route requires the admin role."""

    @pytest.mark.parametrize(
        "path",
        ["/api/admin/dashboard", "/api/admin/shops", "/api/admin/users", "/api/admin/orders",
         "/api/admin/revenue-stats", "/api/admin/order-stats"],
    )
    def test_non_admin_rejected(self, client, owner_headers, path):
        response = client.get(path, headers=owner_headers)
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_anonymous_rejected(self, client):
        assert client.get("/api/admin/dashboard").status_code == 401


class TestDashboard:
    """GET /api/admin/dashboard"""

    def test_counts_and_revenue(self, client, admin_headers, paid_order, place_order):
        place_order()  # unpaid, not counted as revenue

        response = client.get("/api/admin/dashboard", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalCounts"] == {"users": 3, "shops": 1, "orders": 2, "menuItems": 2}
        assert data["usersByRole"] == {"customer": 1, "shop_owner": 1, "admin": 1}
        assert data["shopsByStatus"] == {"active": 1}
        assert data["ordersByStatus"] == {"confirmed": 1, "placed": 1}
        assert data["revenue"] == {"totalCents": 3216, "totalCompletedOrders": 1}
        assert len(data["recentOrders"]) == 2
        assert data["topShops"][0]["totalOrders"] == 2
        assert sum(point["orders"] for point in data["monthlyData"]) == 2
        assert sum(point["revenueCents"] for point in data["monthlyData"]) == 3216

    def test_empty_platform(self, client, admin_headers):
        data = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]
        assert data["revenue"]["totalCents"] == 0
        assert data["monthlyData"] == []


class TestReports:
    """Revenue and order statistics over a trailing period."""

    def test_revenue_stats(self, client, admin_headers, paid_order):
        response = client.get("/api/admin/revenue-stats?period=7", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["dailyStats"]) == 1
        assert data["dailyStats"][0]["revenueCents"] == 3216
        assert data["summary"] == {
            "totalRevenueCents": 3216,
            "totalOrders": 1,
            "averageOrderValueCents": 3216,
            "period": "7 days",
        }

    def test_order_stats(self, client, admin_headers, paid_order, place_order):
        place_order()

        data = client.get("/api/admin/order-stats", headers=admin_headers).json()["data"]

        assert data["period"] == "30 days"
        assert data["statusDistribution"] == {"confirmed": 1, "placed": 1}
        (day_counts,) = data["dailyStats"].values()
        assert day_counts == {"confirmed": 1, "placed": 1}

    def test_period_bounds(self, client, admin_headers):
        assert client.get("/api/admin/revenue-stats?period=0", headers=admin_headers).status_code == 400
        assert client.get("/api/admin/order-stats?period=366", headers=admin_headers).status_code == 400


class TestShopAdministration:
    """Admin shop listing and activation."""

    def test_list_includes_inactive(self, client, db_session, admin_headers, seed_shop, seed_other_owner):
        make_shop(db_session, seed_other_owner, name="Dormant Deli", is_active=False)

        assert client.get("/api/admin/shops", headers=admin_headers).json()["total"] == 2
        inactive = client.get("/api/admin/shops?isActive=false", headers=admin_headers).json()
        assert [s["name"] for s in inactive["data"]] == ["Dormant Deli"]

    def test_toggle_shop(self, client, admin_headers, seed_shop):
        response = client.patch(f"/api/admin/shops/{seed_shop.id}/toggle-status", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Shop deactivated successfully"
        assert response.json()["data"]["isActive"] is False
        assert client.get("/api/shops").json()["total"] == 0

        response = client.patch(f"/api/admin/shops/{seed_shop.id}/toggle-status", headers=admin_headers)
        assert response.json()["message"] == "Shop activated successfully"

    def test_deactivated_shop_refuses_orders(
        self, client, admin_headers, customer_headers, seed_shop, seed_items
    ):
        item_a, _ = seed_items
        client.patch(f"/api/admin/shops/{seed_shop.id}/toggle-status", headers=admin_headers)

        response = client.post(
            "/api/orders",
            json={
                "shop": seed_shop.id,
                "items": [{"menuItemId": item_a.id, "quantity": 2}],
                "deliveryAddress": {"street": "1 Main St", "city": "Springfield", "state": "IL", "zipCode": "62701"},
                "contactInfo": {"phone": "+15551234567"},
                "paymentInfo": {"method": "cash"},
            },
            headers=customer_headers,
        )
        assert response.status_code == 400

    def test_toggle_missing_shop(self, client, admin_headers):
        assert client.patch("/api/admin/shops/4040/toggle-status", headers=admin_headers).status_code == 404


class TestUserAdministration:
    """Admin user listing and activation."""

    def test_list_users_by_role(self, client, admin_headers, seed_customer, seed_owner):
        body = client.get("/api/admin/users?role=customer", headers=admin_headers).json()
        assert body["total"] == 1
        assert body["data"][0]["email"] == "customer@test.com"
        assert "password" not in body["data"][0]

    def test_search_users(self, client, admin_headers, seed_customer, seed_owner):
        body = client.get("/api/admin/users?search=olivia", headers=admin_headers).json()
        assert [u["email"] for u in body["data"]] == ["owner@test.com"]

    def test_cannot_toggle_self(self, client, admin_headers, seed_admin):
        response = client.patch(f"/api/admin/users/{seed_admin.id}/toggle-status", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot deactivate your own account"

    def test_deactivated_user_locked_out(self, client, admin_headers, seed_customer):
        headers = auth_headers_for(seed_customer)

        response = client.patch(f"/api/admin/users/{seed_customer.id}/toggle-status", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "User deactivated successfully"
        assert response.json()["data"]["isActive"] is False
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_reactivate_user(self, client, admin_headers, seed_customer):
        path = f"/api/admin/users/{seed_customer.id}/toggle-status"
        client.patch(path, headers=admin_headers)
        response = client.patch(path, headers=admin_headers)
        assert response.json()["message"] == "User activated successfully"


class TestAdminOrders:
    """GET /api/admin/orders"""

    def test_filter_by_payment_status(self, client, admin_headers, paid_order, place_order):
        place_order()

        paid = client.get("/api/admin/orders?paymentStatus=completed", headers=admin_headers).json()
        pending = client.get("/api/admin/orders?paymentStatus=pending", headers=admin_headers).json()

        assert [o["id"] for o in paid["data"]] == [paid_order["id"]]
        assert pending["total"] == 1
