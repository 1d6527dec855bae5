"""
Order store contract.

The store owns persisted order rows. Everything else talks to it through
this small async interface: select, insert, update, delete, delete by
filter and a subscription to insert/delete events.
"""

import logging
import uuid
from datetime import datetime
from typing import AsyncIterator, Optional, Protocol

from .errors import NotFoundError
from .events import FeedEvent, OrderDeleted, OrderInserted
from .live_feed import OrderFeed
from .models import Order, OrderCreate, OrderPatch

logger = logging.getLogger(__name__)


class OrderStore(Protocol):
    """Async interface every order store implements."""

    async def select(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Order]: ...

    async def insert(self, record: OrderCreate) -> Order: ...

    async def update(self, order_id: str, patch: OrderPatch) -> Order: ...

    async def delete(self, order_id: str) -> None: ...

    async def delete_where(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> int: ...

    def subscribe(self) -> AsyncIterator[FeedEvent]: ...


def matches(
    order: Order,
    name: Optional[str] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> bool:
    """Filter predicate shared by in-process stores.

    ``since`` is inclusive, ``until`` exclusive.
    """
    if name is not None and order.name != name:
        return False
    if since is not None and order.timestamp < since:
        return False
    if until is not None and order.timestamp >= until:
        return False
    return True


class MemoryOrderStore:
    """Dict-backed store for a single process."""

    def __init__(self, feed: Optional[OrderFeed] = None):
        self._rows: dict[str, Order] = {}
        self.feed = feed or OrderFeed()

    async def select(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Order]:
        rows = [o for o in self._rows.values() if matches(o, name, since, until)]
        rows.sort(key=lambda o: o.timestamp, reverse=descending)
        return rows[:limit] if limit is not None else rows

    async def insert(self, record: OrderCreate) -> Order:
        order = Order(id=uuid.uuid4().hex, **record.model_dump())
        self._rows[order.id] = order
        self.feed.publish(OrderInserted(order))
        return order

    async def update(self, order_id: str, patch: OrderPatch) -> Order:
        current = self._rows.get(order_id)
        if current is None:
            raise NotFoundError(order_id)
        order = current.model_copy(update=patch.model_dump(exclude_none=True))
        self._rows[order_id] = order
        self.feed.publish(OrderInserted(order))
        return order

    async def delete(self, order_id: str) -> None:
        if self._rows.pop(order_id, None) is None:
            raise NotFoundError(order_id)
        self.feed.publish(OrderDeleted(order_id))

    async def delete_where(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> int:
        doomed = [o.id for o in self._rows.values() if matches(o, name, since, until)]
        for order_id in doomed:
            await self.delete(order_id)
        return len(doomed)

    def subscribe(self) -> AsyncIterator[FeedEvent]:
        return self.feed.subscribe()
