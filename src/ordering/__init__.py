"""
Food ordering core.

Menu composition and pricing, the once-per-day order lifecycle, today's
aggregate view and the live feed that keeps it current.
"""

from .admin import BulkDeleteResult, delete_by_phrase, delete_order
from .aggregation import OrderSummary, TodayOrdersView
from .client import HttpOrderStore
from .errors import (
    InvalidCombinationError,
    NotFoundError,
    OrderingError,
    StoreError,
    ValidationError,
)
from .events import FeedEvent, OrderDeleted, OrderInserted, parse_feed_event
from .lifecycle import OrderSession, OrderState
from .live_feed import FeedAdapter, OrderFeed
from .menu import DEFAULT_MENU, MenuConfig, MenuSelection, item_of_the_day
from .models import Order, OrderCreate, OrderPatch
from .pricing import DEFAULT_PRICES, PriceList, price
from .session_storage import SessionStorage
from .store import MemoryOrderStore, OrderStore

__all__ = [
    "BulkDeleteResult",
    "delete_by_phrase",
    "delete_order",
    "OrderSummary",
    "TodayOrdersView",
    "HttpOrderStore",
    "InvalidCombinationError",
    "NotFoundError",
    "OrderingError",
    "StoreError",
    "ValidationError",
    "FeedEvent",
    "OrderDeleted",
    "OrderInserted",
    "parse_feed_event",
    "OrderSession",
    "OrderState",
    "FeedAdapter",
    "OrderFeed",
    "DEFAULT_MENU",
    "MenuConfig",
    "MenuSelection",
    "item_of_the_day",
    "Order",
    "OrderCreate",
    "OrderPatch",
    "DEFAULT_PRICES",
    "PriceList",
    "price",
    "SessionStorage",
    "MemoryOrderStore",
    "OrderStore",
]
