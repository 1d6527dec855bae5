"""Shared FastAPI dependencies."""
from datetime import datetime
from typing import Callable

from ordering.days import local_now
from ordering.menu import DEFAULT_MENU, MenuConfig
from ordering.pricing import PriceList

from .config import get_settings


def get_clock() -> Callable[[], datetime]:
    """Source of "now" for day-boundary decisions."""
    return local_now


def get_menu() -> MenuConfig:
    return DEFAULT_MENU


def get_prices() -> PriceList:
    return get_settings().price_list()
