"""
Admin actions on the order table.

There is no access control here: anyone who can reach these functions
(or the endpoints built on them) can delete orders.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .aggregation import TodayOrdersView
from .days import local_now
from .errors import NotFoundError, StoreError, ValidationError
from .models import Order

logger = logging.getLogger(__name__)


@dataclass
class BulkDeleteResult:
    """Outcome of a delete-by-phrase run."""

    phrase: str
    matched: int = 0
    deleted: int = 0
    failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "phrase": self.phrase,
            "matched": self.matched,
            "deleted": self.deleted,
            "failed": list(self.failed),
        }


def order_mentions(order: Order, phrase: str) -> bool:
    """Case-insensitive substring match against any of the order's items."""
    needle = phrase.casefold()
    return any(needle in item.casefold() for item in order.items)


async def delete_order(store, order_id: str, view: Optional[TodayOrdersView] = None) -> bool:
    """Delete one order by id.

    A missing row counts as already deleted. Returns whether a row was
    removed by this call.

    Raises:
        StoreError: the delete failed for any other reason.
    """
    removed = True
    try:
        await store.delete(order_id)
    except NotFoundError:
        logger.info(f"[ADMIN] Order {order_id} was already gone")
        removed = False
    except StoreError as e:
        logger.error(f"[ADMIN] Failed to delete order {order_id}: {e}")
        raise
    if view is not None:
        view.remove(order_id)
    return removed


async def delete_by_phrase(
    store,
    phrase: str,
    view: Optional[TodayOrdersView] = None,
    now: Optional[datetime] = None,
) -> BulkDeleteResult:
    """Delete every order with an item containing ``phrase``.

    Rows are deleted one at a time. A failure on one row does not stop
    the rest, and rows already deleted stay deleted. When a view is
    given it is refetched afterwards.

    Raises:
        ValidationError: empty phrase.
        StoreError: the initial fetch failed; nothing was deleted.
    """
    phrase = phrase.strip()
    if not phrase:
        raise ValidationError("Enter a phrase to match")

    result = BulkDeleteResult(phrase=phrase)
    orders = await store.select()
    doomed = [o for o in orders if order_mentions(o, phrase)]
    result.matched = len(doomed)

    for order in doomed:
        try:
            await store.delete(order.id)
        except NotFoundError:
            result.deleted += 1
        except StoreError as e:
            logger.warning(f"[ADMIN] Could not delete {order.id} while matching '{phrase}': {e}")
            result.failed.append(order.id)
        else:
            result.deleted += 1

    logger.info(
        f"[ADMIN] Deleted {result.deleted}/{result.matched} orders matching '{phrase}'"
    )

    if view is not None:
        try:
            await view.refresh(store, now or local_now())
        except StoreError as e:
            logger.error(f"[ADMIN] Refetch after bulk delete failed: {e}")
    return result
