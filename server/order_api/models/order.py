"""Order data models."""
from pydantic import BaseModel

from ordering.models import Order, OrderCreate, OrderPatch


class DeleteResult(BaseModel):
    """Outcome of a delete-by-filter or single admin delete."""

    deleted: int


class BulkDeleteResponse(BaseModel):
    """Outcome of a delete-by-phrase run."""

    phrase: str
    matched: int
    deleted: int
    failed: list[str] = []


class FeedStats(BaseModel):
    """Live feed statistics."""

    total_published: int
    total_subscribers: int
    events_by_type: dict[str, int]
    current_subscribers: int
    history_size: int


__all__ = ["Order", "OrderCreate", "OrderPatch", "DeleteResult", "BulkDeleteResponse", "FeedStats"]
