"""
Tests for the order API endpoints.

These tests verify:
1. The store contract over HTTP (select, insert, update, delete)
2. Today's summary and the plain-text export
3. Menu selection rules and price quotes
4. Admin deletions

Usage:
    pytest tests/test_order_api.py -v
"""
from datetime import timedelta

import pytest


def post_order(client, name, items, timestamp):
    response = client.post(
        "/api/orders",
        json={"name": name, "items": items, "timestamp": timestamp.isoformat()},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    def test_health(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestOrdersEndpoints:
    """The store contract over HTTP."""

    def test_insert_and_select(self, api_client, now):
        created = post_order(api_client, "Amina", ["Ugali + Nyama"], now)
        assert created["id"]
        assert created["name"] == "Amina"

        response = api_client.get("/api/orders", params={"name": "Amina"})
        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [created["id"]]

    def test_insert_rejects_blank_name_and_empty_items(self, api_client, now):
        ts = now.isoformat()
        assert api_client.post("/api/orders", json={"name": " ", "items": ["Pilau"], "timestamp": ts}).status_code == 422
        assert api_client.post("/api/orders", json={"name": "Amina", "items": [], "timestamp": ts}).status_code == 422

    def test_today_excludes_yesterday(self, api_client, now, yesterday):
        post_order(api_client, "Amina", ["Pilau"], yesterday)
        today = post_order(api_client, "Baraka", ["Pilau"], now)

        response = api_client.get("/api/orders/today")

        assert [o["id"] for o in response.json()] == [today["id"]]

    def test_latest(self, api_client, now):
        assert api_client.get("/api/orders/latest").status_code == 404
        post_order(api_client, "Amina", ["Pilau"], now - timedelta(hours=1))
        newest = post_order(api_client, "Baraka", ["Chipsi"], now)
        assert api_client.get("/api/orders/latest").json()["id"] == newest["id"]

    def test_patch(self, api_client, now):
        created = post_order(api_client, "Amina", ["Pilau"], now)

        response = api_client.patch(f"/api/orders/{created['id']}", json={"items": ["Wali + Maini"]})

        assert response.status_code == 200
        assert response.json()["items"] == ["Wali + Maini"]
        assert response.json()["name"] == "Amina"

    def test_patch_missing_is_404(self, api_client):
        response = api_client.patch("/api/orders/nope", json={"items": ["Pilau"]})
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_delete(self, api_client, now):
        created = post_order(api_client, "Amina", ["Pilau"], now)

        assert api_client.delete(f"/api/orders/{created['id']}").status_code == 204
        assert api_client.delete(f"/api/orders/{created['id']}").status_code == 404
        assert api_client.get("/api/orders").json() == []

    def test_delete_by_filter(self, api_client, now):
        post_order(api_client, "Amina", ["Pilau"], now)
        post_order(api_client, "Baraka", ["Pilau"], now)

        assert api_client.delete("/api/orders").status_code == 422

        response = api_client.delete("/api/orders", params={"name": "Amina"})
        assert response.json() == {"deleted": 1}
        assert len(api_client.get("/api/orders").json()) == 1


class TestSummaryAndExport:
    def test_summary_uses_camel_case(self, api_client, now, yesterday):
        post_order(api_client, "Amina", ["Ugali + Nyama"], now)
        post_order(api_client, "Baraka", ["Ugali + Nyama"], now)
        post_order(api_client, "Neema", ["Pilau"], yesterday)

        data = api_client.get("/api/orders/summary").json()

        assert data["date"] == now.date().isoformat()
        assert data["orderCount"] == 2
        assert data["foodCounts"] == {"Ugali + Nyama": 2}
        assert data["itemsRevenue"] == 6000
        assert data["deliveryFees"] == 2000
        assert data["totalRevenue"] == 8000
        assert data["feePolicy"] == "per_order"

    def test_export_text(self, api_client, now):
        post_order(api_client, "Amina", ["Pilau"], now)

        response = api_client.get("/api/orders/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        lines = response.text.splitlines()
        assert lines[2] == "1. Amina - October 18, 2026, 12:30"
        assert lines[3] == "   Items: Pilau"


class TestMenuEndpoints:
    def test_menu(self, api_client):
        data = api_client.get("/api/menu").json()
        assert "Pilau" in data["standalone_mains"]
        assert data["prices"]["delivery_fee"] == 1000

    def test_item_of_the_day(self, api_client, now):
        data = api_client.get("/api/menu/item-of-the-day").json()
        assert data == {
            "date": "2026-10-18",
            "label": "Chipsi + Nyama",
            "price": 2000,
            "legal": False,
        }

    @pytest.mark.parametrize(
        "label, expected",
        [("Pilau", 3000), ("Chipsi + Mayai", 3000), ("Wali + Samaki", 5000), ("Wali Nyama", 0)],
    )
    def test_price_quote(self, api_client, label, expected):
        response = api_client.get("/api/menu/price", params={"label": label})
        assert response.json() == {"label": label, "price": expected}

    def test_select_main_then_side(self, api_client):
        response = api_client.post(
            "/api/menu/selection",
            json={"main": "Ugali", "action": "select_side", "value": "Nyama"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "main": "Ugali",
            "side": "Nyama",
            "label": "Ugali + Nyama",
            "items": ["Ugali + Nyama"],
            "price": 3000,
        }

    def test_standalone_main_clears_side(self, api_client):
        response = api_client.post(
            "/api/menu/selection",
            json={"main": "Wali", "side": "Nyama", "action": "select_main", "value": "Pilau"},
        )
        assert response.json()["side"] is None
        assert response.json()["items"] == ["Pilau"]

    def test_illegal_side_is_422(self, api_client):
        response = api_client.post(
            "/api/menu/selection",
            json={"main": "Pilau", "action": "select_side", "value": "Nyama"},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "invalid_combination"

    def test_unknown_dish_is_422(self, api_client):
        response = api_client.post(
            "/api/menu/selection",
            json={"action": "select_main", "value": "Pizza"},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"


class TestAdminEndpoints:
    def test_delete_one_is_idempotent(self, api_client, now):
        created = post_order(api_client, "Amina", ["Pilau"], now)
        url = f"/api/admin/orders/{created['id']}"

        assert api_client.delete(url).json() == {"deleted": 1}
        assert api_client.delete(url).json() == {"deleted": 0}

    def test_delete_by_phrase(self, api_client, now):
        post_order(api_client, "Amina", ["Ugali + Nyama"], now)
        post_order(api_client, "Baraka", ["Pilau"], now)
        post_order(api_client, "Neema", ["Ugali + Maini"], now)

        response = api_client.post("/api/admin/orders/delete-by-phrase", params={"phrase": "ugali"})

        assert response.json() == {"phrase": "ugali", "matched": 2, "deleted": 2, "failed": []}
        assert [o["name"] for o in api_client.get("/api/orders").json()] == ["Baraka"]

    def test_blank_phrase_is_422(self, api_client):
        response = api_client.post("/api/admin/orders/delete-by-phrase", params={"phrase": "  "})
        assert response.status_code == 422


class TestFeedEndpoints:
    def test_stats(self, api_client):
        data = api_client.get("/api/orders/stream/stats").json()
        assert set(data) == {
            "total_published",
            "total_subscribers",
            "events_by_type",
            "current_subscribers",
            "history_size",
        }
