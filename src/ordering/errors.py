"""Error taxonomy shared by the ordering core and the order API."""

from typing import Optional


class OrderingError(Exception):
    """Base class for all ordering errors."""


class ValidationError(OrderingError):
    """Input rejected before any store access (empty name, bad selection)."""


class InvalidCombinationError(ValidationError):
    """A side that is not allowed with the currently selected main."""

    def __init__(self, main: Optional[str], side: str):
        self.main = main
        self.side = side
        super().__init__(f"{side} cannot be combined with {main}")


class StoreError(OrderingError):
    """Any failure reported by the order store."""


class NotFoundError(StoreError):
    """The order targeted by an update or delete no longer exists."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")
