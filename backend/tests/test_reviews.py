"""
Tests for shop reviews and the shop rating aggregate.
"""

import pytest


DELIVERED_PATH = ("confirmed", "preparing", "ready_for_pickup", "out_for_delivery", "delivered")


def review_body(order_id: int, overall: int = 4, food: int = 5, delivery: int = 3) -> dict:
    return {
        "order": order_id,
        "foodRating": food,
        "deliveryRating": delivery,
        "overallRating": overall,
        "title": "Solid dinner",
        "review": "Arrived hot and on time.",
    }


@pytest.fixture
def delivered_order(place_order, advance_order):
    order = place_order()
    advance_order(order["id"], *DELIVERED_PATH)
    return order


class TestCreateReview:
    """POST /api/reviews"""

    def test_create_review_updates_shop_rating(
        self, client, db_session, delivered_order, customer_headers, seed_shop, seed_customer
    ):
        response = client.post("/api/reviews", json=review_body(delivered_order["id"]), headers=customer_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["orderId"] == delivered_order["id"]
        assert data["shopId"] == seed_shop.id
        assert data["userId"] == seed_customer.id
        assert data["userName"] == "Carla Customer"

        db_session.refresh(seed_shop)
        assert seed_shop.rating_count == 1
        assert seed_shop.rating_average == 4.0
        assert seed_shop.food_rating_average == 5.0
        assert seed_shop.delivery_rating_average == 3.0

    def test_average_over_several_reviews(
        self, client, db_session, place_order, advance_order, customer_headers, seed_shop
    ):
        for overall in (5, 4, 4):
            order = place_order()
            advance_order(order["id"], *DELIVERED_PATH)
            response = client.post(
                "/api/reviews", json=review_body(order["id"], overall=overall), headers=customer_headers
            )
            assert response.status_code == 201

        response = client.get(f"/api/shops/{seed_shop.id}", headers=customer_headers)
        rating = response.json()["data"]["rating"]
        assert rating["count"] == 3
        assert rating["average"] == 4.3

    def test_one_review_per_order(self, client, delivered_order, customer_headers):
        client.post("/api/reviews", json=review_body(delivered_order["id"]), headers=customer_headers)

        response = client.post("/api/reviews", json=review_body(delivered_order["id"]), headers=customer_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "You have already reviewed this order"

    def test_undelivered_order_rejected(self, client, place_order, customer_headers):
        order = place_order()
        response = client.post("/api/reviews", json=review_body(order["id"]), headers=customer_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Can only review delivered orders"

    def test_other_customer_cannot_review(self, client, delivered_order, other_customer_headers):
        response = client.post(
            "/api/reviews", json=review_body(delivered_order["id"]), headers=other_customer_headers
        )
        assert response.status_code == 401

    def test_missing_order(self, client, customer_headers):
        response = client.post("/api/reviews", json=review_body(98765), headers=customer_headers)
        assert response.status_code == 404

    def test_title_required(self, client, delivered_order, customer_headers):
        body = review_body(delivered_order["id"])
        del body["title"]
        response = client.post("/api/reviews", json=body, headers=customer_headers)
        assert response.status_code == 400


class TestDeleteReview:
    """DELETE /api/reviews/{id}"""

    @pytest.fixture
    def review_id(self, client, delivered_order, customer_headers):
        response = client.post("/api/reviews", json=review_body(delivered_order["id"]), headers=customer_headers)
        return response.json()["data"]["id"]

    def test_author_deletes_review(self, client, db_session, review_id, customer_headers, seed_shop):
        response = client.delete(f"/api/reviews/{review_id}", headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Review deleted successfully"
        db_session.refresh(seed_shop)
        assert seed_shop.rating_count == 0
        assert seed_shop.rating_average == 0.0

    def test_admin_deletes_review(self, client, review_id, admin_headers):
        response = client.delete(f"/api/reviews/{review_id}", headers=admin_headers)
        assert response.status_code == 200

    def test_other_user_cannot_delete(self, client, review_id, other_customer_headers, owner_headers):
        assert client.delete(f"/api/reviews/{review_id}", headers=other_customer_headers).status_code == 401
        assert client.delete(f"/api/reviews/{review_id}", headers=owner_headers).status_code == 401


class TestShopReviewListing:
    """GET /api/shops/{id}/reviews"""

    def test_lists_reviews(self, client, delivered_order, customer_headers, seed_shop):
        client.post("/api/reviews", json=review_body(delivered_order["id"]), headers=customer_headers)

        response = client.get(f"/api/shops/{seed_shop.id}/reviews")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["title"] == "Solid dinner"

    def test_unknown_shop(self, client):
        assert client.get("/api/shops/5555/reviews").status_code == 404
