"""
Order Record Lifecycle.

One ``OrderSession`` per person per client. It holds the draft selection
and the reference to the person's order for today, and decides whether a
submission inserts a new row or updates the existing one.

The insert-or-update decision is a read followed by a write with no
transaction around it. Two devices submitting for the same name at the
same moment can both insert; the later timestamp wins in every view.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from .days import is_same_day, start_of_day
from .errors import NotFoundError, StoreError, ValidationError
from .menu import (
    DEFAULT_MENU,
    MenuConfig,
    MenuSelection,
    compose_label,
    parse_label,
    select_item_of_the_day,
    select_main,
    select_side,
)
from .models import Order, OrderCreate, OrderPatch
from .pricing import DEFAULT_PRICES, PriceList, order_total
from .session_storage import SessionStorage

logger = logging.getLogger(__name__)


class OrderState(str, Enum):
    """Where a person's order for today stands."""

    NO_ORDER = "no_order"
    PENDING = "pending"
    SUBMITTED = "submitted"
    UPDATED = "updated"
    DELETED = "deleted"


class OrderSession:
    """Draft, existing-order reference and state for one person."""

    def __init__(
        self,
        store,
        menu: MenuConfig = DEFAULT_MENU,
        prices: PriceList = DEFAULT_PRICES,
        storage: Optional[SessionStorage] = None,
        name: str = "",
    ):
        self.store = store
        self.menu = menu
        self.prices = prices
        self.storage = storage
        self.name = name
        self.selection = MenuSelection()
        self.existing_order_id: Optional[str] = None
        self.existing_order_time: Optional[datetime] = None
        self.state = OrderState.NO_ORDER

    @property
    def items(self) -> list[str]:
        label = compose_label(self.selection, self.menu)
        return [label] if label else []

    @property
    def draft_total(self) -> int:
        """Price of the draft including the delivery fee, 0 when empty."""
        return order_total(self.items, self.prices, self.menu) if self.items else 0

    def _adopt(self, order: Order) -> None:
        self.existing_order_id = order.id
        self.existing_order_time = order.timestamp

    def _drop_reference(self) -> None:
        self.existing_order_id = None
        self.existing_order_time = None

    def references_today(self, now: datetime) -> bool:
        """Whether the referenced order belongs to the day of ``now``."""
        return (
            self.existing_order_id is not None
            and self.existing_order_time is not None
            and is_same_day(self.existing_order_time, now)
        )

    def _touch_draft(self, selection: MenuSelection) -> MenuSelection:
        self.selection = selection
        if self.state in (OrderState.NO_ORDER, OrderState.DELETED):
            self.state = OrderState.PENDING
        return selection

    async def load(self, now: datetime) -> Optional[Order]:
        """Look up today's order for this name and adopt it if present.

        Raises:
            StoreError: the lookup failed; the session is left unchanged.
        """
        if not self.name.strip() and self.storage is not None:
            self.name = self.storage.remembered_name() or ""
        name = self.name.strip()
        if not name:
            return None

        try:
            found = await self.store.select(name=name, since=start_of_day(now), descending=True, limit=1)
        except StoreError as e:
            logger.error(f"[SESSION] Could not load today's order for {name}: {e}")
            raise

        if not found:
            if self.existing_order_id is not None:
                logger.info(f"[SESSION] No order yet today for {name}, dropping {self.existing_order_id}")
            self._drop_reference()
            self.state = OrderState.NO_ORDER if self.selection.is_empty else OrderState.PENDING
            return None

        order = found[0]
        self._adopt(order)
        self.selection = parse_label(order.items[0], self.menu)
        self.state = OrderState.SUBMITTED
        logger.info(f"[SESSION] Resumed order {order.id} for {name}")
        return order

    def choose_main(self, main: str) -> MenuSelection:
        return self._touch_draft(select_main(self.selection, main, self.menu))

    def choose_side(self, side: str) -> MenuSelection:
        """Raises InvalidCombinationError without touching the draft."""
        return self._touch_draft(select_side(self.selection, side, self.menu))

    def choose_item_of_the_day(self, now: datetime) -> MenuSelection:
        return self._touch_draft(select_item_of_the_day(self.selection, now, self.menu))

    def clear_selection(self) -> None:
        self.selection = MenuSelection()

    def validate(self) -> list[str]:
        """Return the items to submit, or raise ValidationError."""
        if not self.name.strip():
            raise ValidationError("Please enter your name to continue")
        if self.selection.is_empty:
            raise ValidationError("Please select a menu item")
        items = self.items
        if not items:
            raise ValidationError("Please select both a main dish and a side")
        return items

    async def submit(self, now: datetime) -> Order:
        """Insert today's order, or update it if today's order is already referenced.

        Raises:
            ValidationError: bad name or selection; the store is not touched.
            StoreError: the write failed; session state is unchanged.
        """
        items = self.validate()
        name = self.name.strip()

        # A new calendar day always starts a new row
        target_id = self.existing_order_id if self.references_today(now) else None
        if self.existing_order_id is not None and target_id is None:
            logger.info(
                f"[SESSION] Order {self.existing_order_id} is from an earlier day, submitting a new one"
            )

        order: Optional[Order] = None
        if target_id is not None:
            try:
                order = await self.store.update(target_id, OrderPatch(items=items, timestamp=now))
            except NotFoundError:
                logger.warning(f"[SESSION] Order {target_id} is gone, submitting a new one")
            except StoreError as e:
                logger.error(f"[SESSION] Update of {target_id} failed: {e}")
                raise

        if order is None:
            try:
                order = await self.store.insert(OrderCreate(name=name, items=items, timestamp=now))
            except StoreError as e:
                logger.error(f"[SESSION] Insert for {name} failed: {e}")
                raise
            self.state = OrderState.SUBMITTED
        else:
            self.state = OrderState.UPDATED

        self._adopt(order)
        self.name = name
        if self.storage is not None:
            self.storage.remember_name(name)
            self.storage.save_snapshot(order)
        logger.info(f"[SESSION] {self.state.value} order {order.id} for {name}: {items}")
        return order

    def reset(self) -> None:
        """Forget the existing order locally; the remote row stays put."""
        self._drop_reference()
        self.selection = MenuSelection()
        self.state = OrderState.NO_ORDER

    def forget(self, order_id: str) -> bool:
        """React to a deletion of our order made elsewhere."""
        if order_id != self.existing_order_id:
            return False
        self._drop_reference()
        self.state = OrderState.DELETED
        return True
