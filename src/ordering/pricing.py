"""
Pricing Engine.

Maps a composed item label to a price in whole Tanzanian shillings. The
rules are an ordered ladder of predicates over the label; the first one
that matches wins, so the specific fried-snack and premium rules must
stay ahead of the general combination price.
"""

from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from .menu import DEFAULT_MENU, SEPARATOR, MenuConfig


@dataclass(frozen=True)
class PriceList:
    """Price constants for the ladder and the delivery fee."""

    standalone_rice: int = 3000
    fried_snack_plain: int = 2000
    fried_snack_egg: int = 3000
    fried_snack_poultry: int = 5000
    premium: int = 5000
    premium_side: int = 5000
    # None switches the plain-starch + poultry rule off
    starch_poultry: Optional[int] = None
    combination: int = 3000
    delivery_fee: int = 1000

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_PRICES = PriceList()


def _contains(label: str, name: Optional[str]) -> bool:
    return bool(name) and name in label


def _side_of(label: str) -> str:
    return label.partition(SEPARATOR)[2]


def _main_of(label: str) -> str:
    return label.partition(SEPARATOR)[0]


def price(label: str, prices: PriceList = DEFAULT_PRICES, menu: MenuConfig = DEFAULT_MENU) -> int:
    """Price a single composed item label."""
    snack = menu.fried_snack
    combined = SEPARATOR in label

    if label in menu.standalone_mains:
        return prices.standalone_rice
    if snack and label == snack:
        return prices.fried_snack_plain
    if _contains(label, snack):
        if _contains(label, menu.egg_side):
            return prices.fried_snack_egg
        if any(_contains(label, cut) for cut in menu.poultry_sides):
            return prices.fried_snack_poultry
        return prices.fried_snack_plain
    if menu.premium_dish and label == menu.premium_dish:
        return prices.premium
    if combined and _contains(label, menu.premium_fish):
        return prices.premium
    if combined and menu.premium_dish and _side_of(label) == menu.premium_dish:
        return prices.premium_side
    if (
        combined
        and prices.starch_poultry is not None
        and _main_of(label) in menu.plain_starch_mains
        and _side_of(label) in menu.poultry_sides
    ):
        return prices.starch_poultry
    if combined:
        return prices.combination
    return 0


def items_total(
    items: Iterable[str], prices: PriceList = DEFAULT_PRICES, menu: MenuConfig = DEFAULT_MENU
) -> int:
    """Sum of item prices, without the delivery fee."""
    return sum(price(item, prices, menu) for item in items)


def order_total(
    items: Iterable[str], prices: PriceList = DEFAULT_PRICES, menu: MenuConfig = DEFAULT_MENU
) -> int:
    """Price of one order: its items plus one delivery fee."""
    return items_total(items, prices, menu) + prices.delivery_fee
