"""Feed events: the closed set of changes a subscriber can observe."""

from dataclasses import dataclass
from typing import Any, Union

from .errors import StoreError
from .models import Order, parse_order


@dataclass(frozen=True)
class OrderInserted:
    """A row was inserted (or rewritten by an update)."""

    order: Order

    event_type = "insert"

    def to_dict(self) -> dict:
        return {"type": self.event_type, "record": self.order.to_record()}


@dataclass(frozen=True)
class OrderDeleted:
    """A row was deleted."""

    order_id: str

    event_type = "delete"

    def to_dict(self) -> dict:
        return {"type": self.event_type, "record": {"id": self.order_id}}


FeedEvent = Union[OrderInserted, OrderDeleted]


def parse_feed_event(payload: Any) -> FeedEvent:
    """Validate a raw ``{"type": ..., "record": ...}`` payload.

    Raises:
        StoreError: unknown event type or malformed record.
    """
    if not isinstance(payload, dict):
        raise StoreError(f"Malformed feed event: {payload!r}")
    event_type = payload.get("type")
    record = payload.get("record")
    if event_type == OrderInserted.event_type:
        return OrderInserted(parse_order(record))
    if event_type == OrderDeleted.event_type:
        if not isinstance(record, dict) or not record.get("id"):
            raise StoreError(f"Delete event without id: {payload!r}")
        return OrderDeleted(str(record["id"]))
    raise StoreError(f"Unknown feed event type: {event_type!r}")
