"""Menu and pricing API routes."""
from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends, Query

from ordering.menu import (
    MenuConfig,
    MenuSelection,
    clear_main,
    clear_side,
    compose_label,
    is_legal,
    item_of_the_day,
    select_main,
    select_side,
    selection_items,
)
from ordering.days import as_local
from ordering.pricing import PriceList, price

from ..dependencies import get_clock, get_menu, get_prices
from ..models.menu import ItemOfTheDay, MenuResponse, PriceQuote, SelectionRequest, SelectionResponse

router = APIRouter(prefix="/api/menu", tags=["Menu"])


@router.get("", response_model=MenuResponse)
async def get_menu_config(
    menu: MenuConfig = Depends(get_menu),
    prices: PriceList = Depends(get_prices),
):
    """Mains, sides, combination rules and the price list."""
    return MenuResponse(**menu.to_dict(), prices=prices.to_dict())


@router.get("/item-of-the-day", response_model=ItemOfTheDay)
async def get_item_of_the_day(
    clock: Callable[[], datetime] = Depends(get_clock),
    menu: MenuConfig = Depends(get_menu),
    prices: PriceList = Depends(get_prices),
):
    """Today's featured combination, the same for the whole day."""
    now = clock()
    label = item_of_the_day(now, menu)
    main, _, side = label.partition(" + ")
    return ItemOfTheDay(
        date=as_local(now).date().isoformat(),
        label=label,
        price=price(label, prices, menu),
        legal=is_legal(main, side, menu),
    )


@router.get("/price", response_model=PriceQuote)
async def quote_price(
    label: str = Query(..., min_length=1, description="Composed item label, e.g. 'Ugali + Nyama'"),
    menu: MenuConfig = Depends(get_menu),
    prices: PriceList = Depends(get_prices),
):
    """Price a single composed item label."""
    return PriceQuote(label=label, price=price(label, prices, menu))


@router.post("/selection", response_model=SelectionResponse)
async def apply_selection(
    request: SelectionRequest,
    menu: MenuConfig = Depends(get_menu),
    prices: PriceList = Depends(get_prices),
):
    """
    Apply one choice to a selection and return the new selection.
    An illegal side is rejected with 422 and code ``invalid_combination``.
    """
    selection = MenuSelection(main=request.main, side=request.side)
    if request.action == "select_main":
        selection = select_main(selection, request.value or "", menu)
    elif request.action == "select_side":
        selection = select_side(selection, request.value or "", menu)
    elif request.action == "clear_main":
        selection = clear_main(selection)
    else:
        selection = clear_side(selection)

    items = selection_items(selection, menu)
    return SelectionResponse(
        main=selection.main,
        side=selection.side,
        label=compose_label(selection, menu),
        items=items,
        price=sum(price(item, prices, menu) for item in items),
    )
