"""Shopping list builder.

Provides compute_shopping_list(plan_entries, requirements_by_meal, fridge_stock_by_ingredient)
plus the status filter and summary used by the shopping endpoint.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from mealplan.domain.Fridge import FridgeStock
from mealplan.domain.ShoppingItem import ShoppingItem, parse_quantity, unit_key as _unit_key
from mealplan.utilities.constants import (
    SHOPPING_FILTER_ALL,
    SHOPPING_STATUSES,
    STATUS_IN_STOCK,
    STATUS_NEED_TO_BUY,
    STATUS_PARTIAL,
)

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read an attribute from a domain object or a key from a stored row."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def stock_available(stock: Any, unit: str) -> float:
    """On-hand quantity usable for a line in `unit`; 0 when absent or in another unit."""
    if stock is None:
        return 0
    if isinstance(stock, FridgeStock):
        return stock.quantity_in(unit)
    qty = parse_quantity(_field(stock, "quantity_on_hand", _field(stock, "quantity")))
    if qty is None:
        return 0
    stock_unit = _unit_key(_field(stock, "unit", ""))
    if stock_unit and _unit_key(unit) and stock_unit != _unit_key(unit):
        return 0
    return qty


def compute_shopping_list(plan_entries: Iterable[Any],
                          requirements_by_meal: Mapping[str, Sequence[Any]],
                          fridge_stock_by_ingredient: Mapping[str, Any],
                          ingredient_names: Optional[Mapping[str, str]] = None) -> List[ShoppingItem]:
    """Compute what to buy for the planned meals.

    Args:
        plan_entries: Plan entries already restricted to the wanted date range.
        requirements_by_meal: meal id -> ingredient requirements of that meal.
        fridge_stock_by_ingredient: ingredient id -> on-hand stock.
        ingredient_names: Optional ingredient id -> catalog name, preferred over
            the names carried by the requirement rows.

    Returns:
        One ShoppingItem per (ingredient, unit), sorted by name (case-insensitive),
        then ingredient id. Missing meals, missing stock and malformed or zero quantities
        contribute zero; nothing is raised.
    """
    totals: Dict[Tuple[str, str], float] = {}
    units: Dict[Tuple[str, str], str] = {}
    names: Dict[str, str] = {}

    for entry in plan_entries or []:
        requirements = requirements_by_meal.get(_field(entry, "meal_id")) if requirements_by_meal else None
        if not requirements:
            continue
        for req in requirements:
            ingredient_id = _field(req, "ingredient_id")
            if not ingredient_id:
                continue
            qty = parse_quantity(_field(req, "quantity"))
            if qty is None or qty <= 0:
                logger.debug("Ignoring malformed quantity %r for ingredient %s",
                             _field(req, "quantity"), ingredient_id)
                continue
            unit = (_field(req, "unit", "") or "").strip()
            key = (ingredient_id, _unit_key(unit))
            totals[key] = totals.get(key, 0) + qty
            units.setdefault(key, unit)
            if not names.get(ingredient_id):
                names[ingredient_id] = _field(req, "ingredient_name", "") or ""

    stock_index = fridge_stock_by_ingredient or {}
    catalog = ingredient_names or {}
    items: List[ShoppingItem] = []
    for key, required in totals.items():
        ingredient_id, unit = key[0], units[key]
        name = catalog.get(ingredient_id) or names.get(ingredient_id) or ingredient_id
        in_stock = stock_available(stock_index.get(ingredient_id), unit)
        items.append(ShoppingItem(ingredient_id, name, required, unit, in_stock))

    items.sort(key=lambda item: item.sort_key())
    return items


def filter_shopping_list(items: Sequence[ShoppingItem], status: str = SHOPPING_FILTER_ALL) -> List[ShoppingItem]:
    """Return the items whose status matches; 'all' returns every item. Order is preserved."""
    if status == SHOPPING_FILTER_ALL:
        return list(items)
    if status not in SHOPPING_STATUSES:
        raise ValueError(f"Unknown shopping filter: {status!r}")
    return [item for item in items if item.status == status]


def summarize_shopping_list(items: Sequence[ShoppingItem]) -> Dict[str, int]:
    statuses = [item.status for item in items]
    return {
        "total_items": len(statuses),
        "need_to_buy": statuses.count(STATUS_NEED_TO_BUY),
        "partial": statuses.count(STATUS_PARTIAL),
        "in_stock": statuses.count(STATUS_IN_STOCK),
    }


__all__ = ['compute_shopping_list', 'stock_available', 'filter_shopping_list', 'summarize_shopping_list']
