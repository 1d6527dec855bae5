"""Menu and pricing models."""
from pydantic import BaseModel
from typing import Literal, Optional


class MenuResponse(BaseModel):
    """Menu configuration with the price list in force."""

    mains: list[str]
    sides: list[str]
    standalone_mains: list[str]
    fried_snack: Optional[str] = None
    fried_snack_sides: list[str]
    plain_starch_mains: list[str]
    excluded_side: Optional[str] = None
    prices: dict[str, Optional[int]]


class ItemOfTheDay(BaseModel):
    """Today's featured combination."""

    date: str
    label: str
    price: int
    legal: bool


class PriceQuote(BaseModel):
    """Price of one composed label."""

    label: str
    price: int


class SelectionRequest(BaseModel):
    """Apply one main or side choice to a selection."""

    main: Optional[str] = None
    side: Optional[str] = None
    action: Literal["select_main", "select_side", "clear_main", "clear_side"]
    value: Optional[str] = None


class SelectionResponse(BaseModel):
    """Selection after a transition, with what it would submit."""

    main: Optional[str] = None
    side: Optional[str] = None
    label: Optional[str] = None
    items: list[str]
    price: int
