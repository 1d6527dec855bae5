"""Plain-text export of the order list, ready to paste into a chat."""

from typing import Iterable

from .days import as_local
from .models import Order

DEFAULT_TITLE = "Food Orders"


def format_timestamp(order: Order) -> str:
    """e.g. ``October 18, 2026, 12:30``"""
    ts = as_local(order.timestamp)
    return f"{ts:%B} {ts.day}, {ts:%Y, %H:%M}"


def format_orders_text(orders: Iterable[Order], title: str = DEFAULT_TITLE) -> str:
    """Numbered list of orders, newest first."""
    ordered = sorted(orders, key=lambda o: o.timestamp, reverse=True)
    lines = [title, ""]
    for index, order in enumerate(ordered, start=1):
        lines.append(f"{index}. {order.name} - {format_timestamp(order)}")
        lines.append(f"   Items: {', '.join(order.items)}")
        lines.append("")
    return "\n".join(lines)
