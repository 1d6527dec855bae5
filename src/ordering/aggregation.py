"""
Aggregation View.

Keeps today's visible orders, the per-label food counts and the total
revenue consistent with the store. Initial loads and live feed events go
through the same reducer so both paths produce identical state.

Revenue policy: item prices plus one delivery fee per visible order.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .days import is_same_day, start_of_day
from .events import FeedEvent, OrderDeleted, OrderInserted
from .menu import DEFAULT_MENU, MenuConfig
from .models import Order
from .pricing import DEFAULT_PRICES, PriceList, items_total

logger = logging.getLogger(__name__)


@dataclass
class OrderSummary:
    """Snapshot of today's totals."""

    order_count: int
    food_counts: dict[str, int]
    items_revenue: int
    delivery_fees: int
    total_revenue: int
    delivery_fee: int

    def to_dict(self) -> dict:
        return {
            "order_count": self.order_count,
            "food_counts": dict(self.food_counts),
            "items_revenue": self.items_revenue,
            "delivery_fees": self.delivery_fees,
            "total_revenue": self.total_revenue,
            "delivery_fee": self.delivery_fee,
            "fee_policy": "per_order",
        }


class TodayOrdersView:
    """Read-through cache of today's orders with derived counts."""

    def __init__(self, prices: PriceList = DEFAULT_PRICES, menu: MenuConfig = DEFAULT_MENU):
        self.prices = prices
        self.menu = menu
        self._orders: dict[str, Order] = {}
        self.food_counts: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, order_id: str) -> bool:
        return order_id in self._orders

    @property
    def orders(self) -> list[Order]:
        """Visible orders, newest first."""
        return sorted(self._orders.values(), key=lambda o: o.timestamp, reverse=True)

    def get(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def recompute(self) -> None:
        """Rebuild food counts from the visible set."""
        counts: Counter[str] = Counter()
        for order in self._orders.values():
            counts.update(order.items)
        self.food_counts = counts

    def load(self, orders: list[Order], now: datetime) -> None:
        """Replace the visible set with the today-dated subset of ``orders``."""
        self._orders = {o.id: o for o in orders if is_same_day(o.timestamp, now)}
        self.recompute()

    def add(self, order: Order, now: datetime) -> bool:
        """Show an order; orders from other days are ignored.

        An id already on display is replaced, so a repeated insert or an
        update delivered as an insert never double counts.
        """
        if not is_same_day(order.timestamp, now):
            logger.debug(f"[VIEW] Ignoring order {order.id} dated {order.timestamp.date()}")
            return False
        if order.id in self._orders:
            self._orders[order.id] = order
            self.recompute()
        else:
            self._orders[order.id] = order
            self.food_counts.update(order.items)
        return True

    def remove(self, order_id: str) -> bool:
        """Drop an order and recompute counts; unknown ids are a no-op."""
        if self._orders.pop(order_id, None) is None:
            return False
        self.recompute()
        return True

    def apply(self, event: FeedEvent, now: datetime) -> bool:
        """Fold one feed event into the view."""
        if isinstance(event, OrderInserted):
            return self.add(event.order, now)
        if isinstance(event, OrderDeleted):
            return self.remove(event.order_id)
        raise TypeError(f"Unsupported feed event: {event!r}")

    async def refresh(self, store, now: datetime) -> None:
        """Refetch today's orders from the store."""
        orders = await store.select(since=start_of_day(now))
        self.load(orders, now)

    @property
    def items_revenue(self) -> int:
        return sum(items_total(o.items, self.prices, self.menu) for o in self._orders.values())

    @property
    def total_revenue(self) -> int:
        return self.items_revenue + self.prices.delivery_fee * len(self._orders)

    def summary(self) -> OrderSummary:
        return OrderSummary(
            order_count=len(self._orders),
            food_counts=dict(self.food_counts),
            items_revenue=self.items_revenue,
            delivery_fees=self.prices.delivery_fee * len(self._orders),
            total_revenue=self.total_revenue,
            delivery_fee=self.prices.delivery_fee,
        )
