"""Pydantic models for order API requests and responses."""
from .order import Order, OrderCreate, OrderPatch, DeleteResult, BulkDeleteResponse, FeedStats
from .menu import MenuResponse, ItemOfTheDay, PriceQuote, SelectionRequest, SelectionResponse
from .summary import OrderSummaryResponse

__all__ = [
    "Order",
    "OrderCreate",
    "OrderPatch",
    "DeleteResult",
    "BulkDeleteResponse",
    "FeedStats",
    "MenuResponse",
    "ItemOfTheDay",
    "PriceQuote",
    "SelectionRequest",
    "SelectionResponse",
    "OrderSummaryResponse",
]
