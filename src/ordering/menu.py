"""
Menu Composition Model.

Defines the main dishes and sides on offer, which main/side pairs are
legal, how a selection becomes a composed item label, and the
deterministic item of the day.

Selections are immutable values: every transition takes a selection and
returns a new one, so a rejected transition leaves the caller's
selection exactly as it was.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from .days import as_local
from .errors import InvalidCombinationError, ValidationError

SEPARATOR = " + "


@dataclass(frozen=True)
class MenuConfig:
    """Static menu data and the roles some dishes play in the rules."""

    mains: tuple[str, ...]
    sides: tuple[str, ...]
    standalone_mains: frozenset[str] = frozenset()
    fried_snack: Optional[str] = None
    fried_snack_sides: frozenset[str] = frozenset()
    plain_starch_mains: frozenset[str] = frozenset()
    excluded_side: Optional[str] = None
    # Names the pricing ladder matches on
    egg_side: Optional[str] = None
    poultry_sides: frozenset[str] = frozenset()
    premium_dish: Optional[str] = None
    premium_fish: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "mains": list(self.mains),
            "sides": list(self.sides),
            "standalone_mains": sorted(self.standalone_mains),
            "fried_snack": self.fried_snack,
            "fried_snack_sides": sorted(self.fried_snack_sides),
            "plain_starch_mains": sorted(self.plain_starch_mains),
            "excluded_side": self.excluded_side,
        }


DEFAULT_MENU = MenuConfig(
    mains=("Wali", "Ugali", "Chipsi", "Pilau", "Ndizi"),
    sides=(
        "Nyama",
        "Nyama Kavu",
        "Maini",
        "Maharage",
        "Samaki",
        "Mshikaki",
        "Mayai",
        "Kuku Kidari",
        "Kuku Paja",
    ),
    standalone_mains=frozenset({"Pilau"}),
    fried_snack="Chipsi",
    fried_snack_sides=frozenset({"Mayai", "Kuku Kidari", "Kuku Paja"}),
    plain_starch_mains=frozenset({"Wali", "Ugali"}),
    excluded_side="Mayai",
    egg_side="Mayai",
    poultry_sides=frozenset({"Kuku Kidari", "Kuku Paja"}),
    premium_dish="Mshikaki",
    premium_fish="Samaki",
)


@dataclass(frozen=True)
class MenuSelection:
    """The in-progress choice of one main and one side."""

    main: Optional[str] = None
    side: Optional[str] = None

    def to_dict(self) -> dict:
        return {"main": self.main, "side": self.side}

    @property
    def is_empty(self) -> bool:
        return self.main is None and self.side is None


def empty_selection() -> MenuSelection:
    return MenuSelection()


def is_legal(main: Optional[str], side: Optional[str], menu: MenuConfig = DEFAULT_MENU) -> bool:
    """Return whether ``side`` may be served with ``main``.

    A missing main or a missing side is always legal on its own.
    """
    if main is None or side is None:
        return True
    if main in menu.standalone_mains:
        return False
    if main == menu.fried_snack:
        return side in menu.fried_snack_sides
    if main in menu.plain_starch_mains and side == menu.excluded_side:
        return False
    return True


def select_main(selection: MenuSelection, main: str, menu: MenuConfig = DEFAULT_MENU) -> MenuSelection:
    """Choose a main dish, clearing the active side if it becomes illegal."""
    if main not in menu.mains:
        raise ValidationError(f"Unknown main dish: {main}")
    side = selection.side if is_legal(main, selection.side, menu) else None
    return MenuSelection(main=main, side=side)


def select_side(selection: MenuSelection, side: str, menu: MenuConfig = DEFAULT_MENU) -> MenuSelection:
    """Choose a side for the active main.

    Raises:
        ValidationError: ``side`` is not on the menu.
        InvalidCombinationError: ``side`` is not allowed with the active main.
    """
    if side not in menu.sides:
        raise ValidationError(f"Unknown side: {side}")
    if not is_legal(selection.main, side, menu):
        raise InvalidCombinationError(selection.main, side)
    return replace(selection, side=side)


def clear_main(selection: MenuSelection) -> MenuSelection:
    return replace(selection, main=None)


def clear_side(selection: MenuSelection) -> MenuSelection:
    return replace(selection, side=None)


def compose_label(selection: MenuSelection, menu: MenuConfig = DEFAULT_MENU) -> Optional[str]:
    """Turn a selection into its composed item label, or None if incomplete."""
    if selection.main is None:
        return None
    if selection.side is not None:
        return f"{selection.main}{SEPARATOR}{selection.side}"
    if selection.main in menu.standalone_mains:
        return selection.main
    return None


def selection_items(selection: MenuSelection, menu: MenuConfig = DEFAULT_MENU) -> list[str]:
    """The ``items`` sequence a selection submits as (zero or one label)."""
    label = compose_label(selection, menu)
    return [label] if label else []


def parse_label(label: str, menu: MenuConfig = DEFAULT_MENU) -> MenuSelection:
    """Rebuild a selection from a composed label.

    Labels that name dishes no longer on the menu come back as an empty
    selection rather than an error; old orders outlive menu changes.
    """
    main, _, side = label.partition(SEPARATOR)
    if main not in menu.mains:
        return MenuSelection()
    if not side:
        return MenuSelection(main=main)
    if side not in menu.sides or not is_legal(main, side, menu):
        return MenuSelection(main=main)
    return MenuSelection(main=main, side=side)


def all_combinations(menu: MenuConfig = DEFAULT_MENU) -> list[str]:
    """Full mains x sides cross product, mains outer, in menu order."""
    return [f"{main}{SEPARATOR}{side}" for main in menu.mains for side in menu.sides]


def item_of_the_day(now: datetime, menu: MenuConfig = DEFAULT_MENU) -> str:
    """Deterministic item of the day: local ``day_of_month % total_combinations``."""
    combinations = all_combinations(menu)
    if not combinations:
        raise ValidationError("Menu has no combinations")
    return combinations[as_local(now).day % len(combinations)]


def select_item_of_the_day(
    selection: MenuSelection, now: datetime, menu: MenuConfig = DEFAULT_MENU
) -> MenuSelection:
    """Replace the selection with today's item, through the normal transitions."""
    main, _, side = item_of_the_day(now, menu).partition(SEPARATOR)
    chosen = select_main(clear_side(selection), main, menu)
    return select_side(chosen, side, menu)
