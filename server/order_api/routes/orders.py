"""Order table API routes.

These endpoints are the store contract over HTTP: select, insert,
update, delete and delete by filter.
"""
from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ordering.days import start_of_day

from ..database import SQLiteOrderStore, get_order_store
from ..dependencies import get_clock
from ..models.order import DeleteResult, Order, OrderCreate, OrderPatch

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=list[Order])
async def select_orders(
    name: Optional[str] = Query(None, description="Exact person name"),
    since: Optional[datetime] = Query(None, description="Inclusive lower timestamp bound"),
    until: Optional[datetime] = Query(None, description="Exclusive upper timestamp bound"),
    descending: bool = Query(True, description="Newest first"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    store: SQLiteOrderStore = Depends(get_order_store),
):
    """Select orders matching the given filters, ordered by timestamp."""
    return await store.select(name=name, since=since, until=until, descending=descending, limit=limit)


@router.post("", response_model=Order, status_code=201)
async def insert_order(
    record: OrderCreate,
    store: SQLiteOrderStore = Depends(get_order_store),
):
    """Insert a new order; the store assigns its id."""
    return await store.insert(record)


@router.get("/today", response_model=list[Order])
async def get_today_orders(
    store: SQLiteOrderStore = Depends(get_order_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Orders placed since local midnight, newest first."""
    return await store.select(since=start_of_day(clock()))


@router.get("/latest", response_model=Order)
async def get_latest_order(store: SQLiteOrderStore = Depends(get_order_store)):
    """Most recently submitted or updated order."""
    orders = await store.select(limit=1)
    if not orders:
        raise HTTPException(status_code=404, detail="No orders yet")
    return orders[0]


@router.patch("/{order_id}", response_model=Order)
async def update_order(
    order_id: str,
    patch: OrderPatch,
    store: SQLiteOrderStore = Depends(get_order_store),
):
    """Replace an order's items and/or timestamp."""
    return await store.update(order_id, patch)


@router.delete("/{order_id}", status_code=204)
async def delete_order(
    order_id: str,
    store: SQLiteOrderStore = Depends(get_order_store),
):
    """Delete one order; 404 when it does not exist."""
    await store.delete(order_id)
    return Response(status_code=204)


@router.delete("", response_model=DeleteResult)
async def delete_orders_by_filter(
    name: Optional[str] = Query(None),
    since: Optional[datetime] = Query(None),
    until: Optional[datetime] = Query(None),
    store: SQLiteOrderStore = Depends(get_order_store),
):
    """Delete every order matching the filters."""
    if name is None and since is None and until is None:
        raise HTTPException(status_code=422, detail="At least one filter is required")
    deleted = await store.delete_where(name=name, since=since, until=until)
    return DeleteResult(deleted=deleted)
