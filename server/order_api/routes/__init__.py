"""API route modules."""
from .orders import router as orders_router
from .summary import router as summary_router
from .feed import router as feed_router
from .menu import router as menu_router
from .admin import router as admin_router

__all__ = [
    "orders_router",
    "summary_router",
    "feed_router",
    "menu_router",
    "admin_router",
]
