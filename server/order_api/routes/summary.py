"""Order summary and export API routes."""
from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ordering.aggregation import TodayOrdersView
from ordering.days import start_of_day
from ordering.export import format_orders_text
from ordering.menu import MenuConfig
from ordering.pricing import PriceList

from ..config import get_settings
from ..database import SQLiteOrderStore, get_order_store
from ..dependencies import get_clock, get_menu, get_prices
from ..models.summary import OrderSummaryResponse

router = APIRouter(prefix="/api/orders", tags=["Order Summary"])


@router.get("/summary", response_model=OrderSummaryResponse, response_model_by_alias=True)
async def get_order_summary(
    store: SQLiteOrderStore = Depends(get_order_store),
    clock: Callable[[], datetime] = Depends(get_clock),
    menu: MenuConfig = Depends(get_menu),
    prices: PriceList = Depends(get_prices),
):
    """
    Get per-item counts and revenue for today's orders.
    Revenue is item prices plus one delivery fee per order.
    """
    now = clock()
    view = TodayOrdersView(prices, menu)
    await view.refresh(store, now)
    summary = view.summary()
    return OrderSummaryResponse(date=start_of_day(now).date().isoformat(), **summary.to_dict())


@router.get("/export", response_class=PlainTextResponse)
async def export_orders(
    today_only: bool = True,
    store: SQLiteOrderStore = Depends(get_order_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Numbered plain-text list of orders for copying into a message."""
    since = start_of_day(clock()) if today_only else None
    orders = await store.select(since=since)
    return format_orders_text(orders, title=get_settings().export_title)
