"""
Unit tests for the SQLite order store.

Usage:
    pytest tests/test_order_database.py -v
"""
import sqlite3
from datetime import timedelta, timezone

import pytest

from ordering.days import end_of_day, start_of_day
from ordering.errors import NotFoundError, StoreError
from ordering.events import OrderDeleted, OrderInserted
from ordering.models import OrderCreate, OrderPatch


async def insert(store, name, items, timestamp):
    return await store.insert(OrderCreate(name=name, items=items, timestamp=timestamp))


class TestSelect:
    @pytest.mark.asyncio
    async def test_empty_table(self, sqlite_store):
        assert await sqlite_store.select() == []

    @pytest.mark.asyncio
    async def test_round_trip_preserves_fields(self, sqlite_store, now):
        created = await insert(sqlite_store, "Amina", ["Kuku Paja + Wali", "Pilau"], now)

        [loaded] = await sqlite_store.select()

        assert loaded == created
        assert loaded.timestamp == now
        assert loaded.timestamp.tzinfo is not None

    @pytest.mark.asyncio
    async def test_ordering_and_limit(self, sqlite_store, now):
        for offset, name in enumerate(["Amina", "Baraka", "Neema"]):
            await insert(sqlite_store, name, ["Pilau"], now - timedelta(hours=offset))

        newest = await sqlite_store.select(limit=2)
        oldest = await sqlite_store.select(descending=False, limit=1)

        assert [o.name for o in newest] == ["Amina", "Baraka"]
        assert oldest[0].name == "Neema"

    @pytest.mark.asyncio
    async def test_day_window_and_name_filter(self, sqlite_store, now, yesterday):
        await insert(sqlite_store, "Amina", ["Pilau"], yesterday)
        today = await insert(sqlite_store, "Amina", ["Ugali + Nyama"], now)
        await insert(sqlite_store, "Baraka", ["Pilau"], now)

        found = await sqlite_store.select(name="Amina", since=start_of_day(now), until=end_of_day(now))

        assert [o.id for o in found] == [today.id]

    @pytest.mark.asyncio
    async def test_since_compares_instants_across_offsets(self, sqlite_store, now):
        created = await insert(sqlite_store, "Amina", ["Pilau"], now)
        since = (now - timedelta(minutes=1)).astimezone(timezone(timedelta(hours=3)))
        assert [o.id for o in await sqlite_store.select(since=since)] == [created.id]


class TestWrites:
    @pytest.mark.asyncio
    async def test_insert_publishes(self, sqlite_store, now):
        order = await insert(sqlite_store, "Amina", ["Pilau"], now)
        assert sqlite_store.feed.get_history() == [OrderInserted(order)]

    @pytest.mark.asyncio
    async def test_update_rewrites_row_and_publishes_insert(self, sqlite_store, now):
        order = await insert(sqlite_store, "Amina", ["Pilau"], now)
        later = now + timedelta(minutes=5)

        updated = await sqlite_store.update(order.id, OrderPatch(items=["Wali + Maini"], timestamp=later))

        assert updated.id == order.id
        assert updated.name == "Amina"
        assert (await sqlite_store.get(order.id)).items == ["Wali + Maini"]
        assert (await sqlite_store.get(order.id)).timestamp == later
        assert sqlite_store.feed.get_history()[0] == OrderInserted(updated)

    @pytest.mark.asyncio
    async def test_partial_update_keeps_timestamp(self, sqlite_store, now):
        order = await insert(sqlite_store, "Amina", ["Pilau"], now)
        updated = await sqlite_store.update(order.id, OrderPatch(items=["Chipsi"]))
        assert updated.timestamp == now

    @pytest.mark.asyncio
    async def test_update_missing(self, sqlite_store):
        with pytest.raises(NotFoundError):
            await sqlite_store.update("nope", OrderPatch(items=["Pilau"]))

    @pytest.mark.asyncio
    async def test_delete(self, sqlite_store, now):
        order = await insert(sqlite_store, "Amina", ["Pilau"], now)
        await sqlite_store.delete(order.id)

        assert await sqlite_store.select() == []
        assert sqlite_store.feed.get_history()[0] == OrderDeleted(order.id)
        with pytest.raises(NotFoundError):
            await sqlite_store.delete(order.id)

    @pytest.mark.asyncio
    async def test_delete_where(self, sqlite_store, now, yesterday):
        await insert(sqlite_store, "Amina", ["Pilau"], yesterday)
        await insert(sqlite_store, "Amina", ["Pilau"], now)
        await insert(sqlite_store, "Baraka", ["Pilau"], now)

        assert await sqlite_store.delete_where(name="Amina") == 2
        assert [o.name for o in await sqlite_store.select()] == ["Baraka"]
        assert sqlite_store.feed.get_stats()["events_by_type"]["delete"] == 2


class TestFailures:
    @pytest.mark.asyncio
    async def test_unreadable_items_raise_store_error(self, sqlite_store, now):
        order = await insert(sqlite_store, "Amina", ["Pilau"], now)
        conn = sqlite3.connect(sqlite_store.db_path)
        conn.execute("UPDATE orders SET items = ? WHERE id = ?", ("not json", order.id))
        conn.commit()
        conn.close()

        with pytest.raises(StoreError):
            await sqlite_store.select()

    @pytest.mark.asyncio
    async def test_unopenable_database(self, tmp_path):
        from ordering.live_feed import OrderFeed
        from server.order_api.database import SQLiteOrderStore

        blocker = tmp_path / "file"
        blocker.write_text("x")
        store = SQLiteOrderStore(db_path=str(blocker / "orders.db"), feed=OrderFeed())

        with pytest.raises(StoreError):
            await store.select()
