"""SQLite persistence for the orders table.

The store publishes an event to the live feed after every committed
insert, update and delete. Updates go out as inserts of the rewritten
row; subscribers replace rows they already hold.
"""
import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Generator, Optional

from ordering.errors import NotFoundError, StoreError
from ordering.events import FeedEvent, OrderDeleted, OrderInserted
from ordering.live_feed import OrderFeed
from ordering.models import Order, OrderCreate, OrderPatch, parse_order

from .config import get_settings
from .services.order_feed import order_feed

log = logging.getLogger(__name__)

_DDL = """
CREATE TABLE IF NOT EXISTS orders (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    items TEXT NOT NULL,
    timestamp TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_orders_name_timestamp ON orders(name, timestamp);
CREATE INDEX IF NOT EXISTS idx_orders_timestamp ON orders(timestamp);
"""

# Fixed-width UTC text sorts and compares chronologically
_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


def _to_db_ts(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).strftime(_TS_FORMAT)


def _row_to_order(row) -> Order:
    """Convert SQLite row to Order model."""
    try:
        items = json.loads(row["items"])
    except (json.JSONDecodeError, TypeError) as e:
        raise StoreError(f"Order {row['id']} has unreadable items: {e}") from e
    return parse_order({
        "id": row["id"],
        "name": row["name"],
        "items": items,
        "timestamp": row["timestamp"],
    })


def _where(
    name: Optional[str],
    since: Optional[datetime],
    until: Optional[datetime],
) -> tuple[str, list]:
    clauses = []
    params: list = []
    if name is not None:
        clauses.append("name = ?")
        params.append(name)
    if since is not None:
        clauses.append("timestamp >= ?")
        params.append(_to_db_ts(since))
    if until is not None:
        clauses.append("timestamp < ?")
        params.append(_to_db_ts(until))
    return (" WHERE " + " AND ".join(clauses)) if clauses else "", params


class SQLiteOrderStore:
    """
    Read-write order store over a single SQLite file.
    Opens a short-lived connection per operation; sqlite3 errors surface
    as StoreError.
    """

    def __init__(self, db_path: Optional[str] = None, feed: Optional[OrderFeed] = None):
        self.db_path = db_path or get_settings().db_path
        self.feed = feed or order_feed
        self._schema_ready = False

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Open a connection, committing on success and rolling back on error."""
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except (sqlite3.Error, OSError) as e:
            log.error(f"[ORDER STORE] Cannot open {self.db_path}: {e}")
            raise StoreError(f"Cannot open order database: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            if not self._schema_ready:
                conn.executescript(_DDL)
                self._schema_ready = True
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            log.error(f"[ORDER STORE] Database error: {e}")
            raise StoreError(f"Order database error: {e}") from e
        finally:
            conn.close()

    async def select(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Order]:
        where, params = _where(name, since, until)
        sql = f"SELECT * FROM orders{where} ORDER BY timestamp {'DESC' if descending else 'ASC'}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_order(row) for row in rows]

    async def get(self, order_id: str) -> Order:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
        if row is None:
            raise NotFoundError(order_id)
        return _row_to_order(row)

    async def insert(self, record: OrderCreate) -> Order:
        order = Order(id=uuid.uuid4().hex, **record.model_dump())
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO orders (id, name, items, timestamp) VALUES (?, ?, ?, ?)",
                (order.id, order.name, json.dumps(order.items, ensure_ascii=False), _to_db_ts(order.timestamp)),
            )
        log.info(f"[ORDER STORE] Inserted order {order.id} for {order.name}")
        self.feed.publish(OrderInserted(order))
        return order

    async def update(self, order_id: str, patch: OrderPatch) -> Order:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
            if row is None:
                raise NotFoundError(order_id)
            order = _row_to_order(row).model_copy(update=patch.model_dump(exclude_none=True))
            conn.execute(
                "UPDATE orders SET items = ?, timestamp = ? WHERE id = ?",
                (json.dumps(order.items, ensure_ascii=False), _to_db_ts(order.timestamp), order_id),
            )
        log.info(f"[ORDER STORE] Updated order {order_id}")
        self.feed.publish(OrderInserted(order))
        return order

    async def delete(self, order_id: str) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM orders WHERE id = ?", (order_id,))
            deleted = cursor.rowcount
        if not deleted:
            raise NotFoundError(order_id)
        log.info(f"[ORDER STORE] Deleted order {order_id}")
        self.feed.publish(OrderDeleted(order_id))

    async def delete_where(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> int:
        where, params = _where(name, since, until)
        with self._connect() as conn:
            ids = [row["id"] for row in conn.execute(f"SELECT id FROM orders{where}", params).fetchall()]
            conn.executemany("DELETE FROM orders WHERE id = ?", [(order_id,) for order_id in ids])
        for order_id in ids:
            self.feed.publish(OrderDeleted(order_id))
        log.info(f"[ORDER STORE] Deleted {len(ids)} orders by filter")
        return len(ids)

    def subscribe(self) -> AsyncIterator[FeedEvent]:
        return self.feed.subscribe()


_store: Optional[SQLiteOrderStore] = None


def get_order_store() -> SQLiteOrderStore:
    """FastAPI dependency returning the process-wide store."""
    global _store
    if _store is None:
        _store = SQLiteOrderStore()
    return _store
