"""Meal analysis helpers: nutrition totals, fridge coverage, timing and sorting."""
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mealplan.domain.Ingredient import NUTRIENTS
from mealplan.domain.ShoppingItem import parse_quantity
from mealplan.logic.shopping.list_builder import stock_available

__all__ = [
    "calculate_nutrition", "calculate_fridge_percentage", "calculate_total_time",
    "format_time", "apply_meal_sort",
]


def calculate_nutrition(requirements: Sequence[Any], ingredients_by_id: Mapping[str, Any]) -> Dict[str, float]:
    """Sum nutrition over a meal's requirements.

    Ingredient nutrition is per 100 g, so each requirement contributes
    nutrient * quantity / 100. Totals are rounded to one decimal.
    """
    totals = {k: 0.0 for k in NUTRIENTS}
    for req in requirements:
        ingredient = ingredients_by_id.get(req.ingredient_id)
        nutrition = getattr(ingredient, "nutrition", None) if ingredient is not None else None
        if not nutrition:
            continue
        qty = parse_quantity(req.quantity)
        if qty is None:
            continue
        multiplier = qty / 100
        for k in NUTRIENTS:
            value = nutrition.get(k)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                totals[k] += value * multiplier
    return {k: round(v, 1) for k, v in totals.items()}


def calculate_fridge_percentage(requirements: Sequence[Any], stock_by_ingredient: Mapping[str, Any],
                                ingredients_by_id: Optional[Mapping[str, Any]] = None) -> int:
    """Percentage (0-100) of a meal's requirements fully covered by the fridge.

    Pantry-type ingredients only need to be present; regular ones need at least
    the required quantity in the same unit.
    """
    if not requirements:
        return 0
    ingredients_by_id = ingredients_by_id or {}
    covered = 0
    for req in requirements:
        stock = stock_by_ingredient.get(req.ingredient_id)
        ingredient = ingredients_by_id.get(req.ingredient_id)
        if getattr(ingredient, "ingredient_type", "regular") == "pantry":
            if stock is not None:
                covered += 1
            continue
        needed = parse_quantity(req.quantity)
        if needed is None:
            continue
        if stock is not None and stock_available(stock, req.unit) >= needed:
            covered += 1
    return round(covered / len(requirements) * 100)


def calculate_total_time(prep_time: Optional[int] = None, cook_time: Optional[int] = None) -> int:
    return (prep_time or 0) + (cook_time or 0)


def format_time(minutes: int) -> str:
    """Human readable duration: 45 -> '45m', 60 -> '1h', 80 -> '1h 20m'."""
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def apply_meal_sort(meals: List[Dict[str, Any]], sort_by: Optional[str] = None) -> List[Dict[str, Any]]:
    """Sort serialized meals by name, newest first, or highest fridge percentage first."""
    result = list(meals)
    if sort_by == "name":
        result.sort(key=lambda m: (m.get("name") or "").casefold())
    elif sort_by == "created":
        result.sort(key=lambda m: m.get("created_at") or "", reverse=True)
    elif sort_by == "fridge_percentage":
        # stable: equal percentages keep their relative order
        result.sort(key=lambda m: m.get("fridge_percentage") or 0, reverse=True)
    return result
