"""Admin API routes.

No authentication: these endpoints are open to any caller, the same as
the confirmation-dialog-only admin actions they back.
"""
from fastapi import APIRouter, Depends, Query

from ordering import admin

from ..database import SQLiteOrderStore, get_order_store
from ..models.order import BulkDeleteResponse, DeleteResult

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.delete("/orders/{order_id}", response_model=DeleteResult)
async def admin_delete_order(
    order_id: str,
    store: SQLiteOrderStore = Depends(get_order_store),
):
    """Delete one order. Deleting an order that is already gone succeeds."""
    removed = await admin.delete_order(store, order_id)
    return DeleteResult(deleted=1 if removed else 0)


@router.post("/orders/delete-by-phrase", response_model=BulkDeleteResponse)
async def admin_delete_by_phrase(
    phrase: str = Query(..., min_length=1, description="Case-insensitive text to match in items"),
    store: SQLiteOrderStore = Depends(get_order_store),
):
    """
    Delete every order with an item containing the phrase.
    Partial failures are reported in ``failed``; the rest stay deleted.
    """
    result = await admin.delete_by_phrase(store, phrase)
    return BulkDeleteResponse(**result.to_dict())
