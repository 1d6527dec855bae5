"""
Unit tests for the today-orders aggregation view.

Usage:
    pytest tests/test_aggregation.py -v
"""
from datetime import timedelta

import pytest

from ordering.aggregation import TodayOrdersView
from ordering.events import OrderDeleted, OrderInserted
from ordering.models import Order, OrderCreate
from ordering.pricing import DEFAULT_PRICES, PriceList, items_total


def make_order(order_id, name, items, timestamp):
    return Order(id=order_id, name=name, items=items, timestamp=timestamp)


@pytest.fixture
def view():
    return TodayOrdersView()


@pytest.fixture
def today_orders(now):
    return [
        make_order("a", "Amina", ["Ugali + Nyama"], now - timedelta(hours=3)),
        make_order("b", "Baraka", ["Pilau"], now - timedelta(hours=2)),
        make_order("c", "Neema", ["Ugali + Nyama"], now - timedelta(hours=1)),
    ]


class TestLoad:
    """Initial load keeps only today's orders."""

    def test_load_filters_other_days(self, view, today_orders, now, yesterday):
        old = make_order("z", "Juma", ["Chipsi + Mayai"], yesterday)
        view.load(today_orders + [old], now)

        assert len(view) == 3
        assert "z" not in view
        assert view.food_counts == {"Ugali + Nyama": 2, "Pilau": 1}

    def test_orders_newest_first(self, view, today_orders, now):
        view.load(today_orders, now)
        assert [o.id for o in view.orders] == ["c", "b", "a"]

    def test_summary(self, view, today_orders, now):
        view.load(today_orders, now)
        summary = view.summary()

        assert summary.order_count == 3
        assert summary.items_revenue == 3000 * 3
        assert summary.delivery_fees == DEFAULT_PRICES.delivery_fee * 3
        assert summary.total_revenue == 9000 + 3000
        assert summary.to_dict()["fee_policy"] == "per_order"

    def test_empty_view(self, view):
        summary = view.summary()
        assert summary.order_count == 0
        assert summary.total_revenue == 0
        assert summary.food_counts == {}


class TestLiveUpdates:
    """Inserts and deletes keep counts and revenue consistent."""

    def test_insert_increments(self, view, today_orders, now):
        view.load(today_orders[:2], now)
        before = view.total_revenue

        assert view.add(today_orders[2], now) is True

        assert view.food_counts["Ugali + Nyama"] == 2
        assert view.total_revenue == before + 3000 + DEFAULT_PRICES.delivery_fee

    def test_insert_from_another_day_is_ignored(self, view, now, yesterday):
        assert view.add(make_order("y", "Juma", ["Pilau"], yesterday), now) is False
        assert len(view) == 0

    def test_repeated_insert_does_not_double_count(self, view, today_orders, now):
        view.load(today_orders, now)
        view.add(today_orders[0], now)
        assert len(view) == 3
        assert view.food_counts["Ugali + Nyama"] == 2

    def test_update_delivered_as_insert_replaces(self, view, today_orders, now):
        view.load(today_orders, now)
        changed = today_orders[0].model_copy(update={"items": ["Chipsi + Kuku Paja"]})

        view.apply(OrderInserted(changed), now)

        assert len(view) == 3
        assert view.food_counts["Ugali + Nyama"] == 1
        assert view.food_counts["Chipsi + Kuku Paja"] == 1
        assert view.get("a").items == ["Chipsi + Kuku Paja"]

    def test_delete_subtracts_item_total_and_one_fee(self, view, today_orders, now):
        view.load(today_orders, now)
        before = view.total_revenue

        assert view.apply(OrderDeleted("b"), now) is True

        expected = items_total(["Pilau"]) + DEFAULT_PRICES.delivery_fee
        assert view.total_revenue == before - expected
        assert "Pilau" not in view.food_counts

    def test_delete_twice_is_a_no_op(self, view, today_orders, now):
        view.load(today_orders, now)
        view.remove("a")
        snapshot = view.summary()

        assert view.remove("a") is False
        assert view.summary() == snapshot

    def test_unknown_event_type(self, view, now):
        with pytest.raises(TypeError):
            view.apply(object(), now)

    def test_custom_prices(self, today_orders, now):
        view = TodayOrdersView(prices=PriceList(combination=2500, delivery_fee=0))
        view.load(today_orders, now)
        assert view.total_revenue == 2500 * 2 + DEFAULT_PRICES.standalone_rice


class TestRefresh:
    """Refetch goes through the store."""

    @pytest.mark.asyncio
    async def test_refresh_matches_incremental(self, memory_store, now, yesterday):
        incremental = TodayOrdersView()

        await memory_store.insert(OrderCreate(name="Amina", items=["Wali + Maini"], timestamp=now))
        await memory_store.insert(OrderCreate(name="Juma", items=["Pilau"], timestamp=yesterday))
        first = await memory_store.insert(OrderCreate(name="Neema", items=["Pilau"], timestamp=now))
        await memory_store.delete(first.id)

        # Replay the four published events through the incremental path
        stream = memory_store.feed.subscribe(include_history=True, history_count=10)
        for _ in range(4):
            incremental.apply(await stream.__anext__(), now)
        await stream.aclose()

        fetched = TodayOrdersView()
        await fetched.refresh(memory_store, now)

        assert fetched.summary() == incremental.summary()
        assert fetched.food_counts == {"Wali + Maini": 1}
