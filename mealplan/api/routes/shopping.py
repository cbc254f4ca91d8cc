import logging
from datetime import date as _date
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from mealplan.api.routes.plan import date_range
from mealplan.domain.ShoppingItem import ShoppingItem
from mealplan.infra.Fridge_Repository import FridgeRepository
from mealplan.infra.Ingredient_Repository import IngredientRepository
from mealplan.infra.Meal_Repository import MealRepository
from mealplan.infra.Plan_Repository import PlanRepository
from mealplan.infra.paths import get_data_dir
from mealplan.infra.pdf_utils import generate_pdf_for_shopping_list
from mealplan.logic.shopping.list_builder import (
    compute_shopping_list,
    filter_shopping_list,
    summarize_shopping_list,
)

router = APIRouter(prefix="/api/shopping", tags=["shopping"])
logger = logging.getLogger(__name__)

STATUS_PATTERN = "^(all|need-to-buy|partial|in-stock)$"


def build_shopping_list(data_dir: Path, start: Optional[str] = None, end: Optional[str] = None) -> List[ShoppingItem]:
    """Fetch plan, requirements and stock for the window and aggregate them."""
    entries = PlanRepository(data_dir).list_plan_entries(start, end)
    if not entries:
        return []
    requirements = MealRepository(data_dir).requirements_by_meal({e.meal_id for e in entries})
    stock = FridgeRepository(data_dir).stock_by_ingredient()
    names = IngredientRepository(data_dir).names_by_id()
    items = compute_shopping_list(entries, requirements, stock, names)
    logger.info("Shopping list for %s..%s: %d plan entries, %d items", start, end, len(entries), len(items))
    return items


@router.get("")
def get_shopping_list(start: Optional[_date] = Query(default=None), end: Optional[_date] = Query(default=None),
                      status: str = Query(default="all", pattern=STATUS_PATTERN),
                      data_dir: Path = Depends(get_data_dir)):
    start_iso, end_iso = date_range(start, end)
    items = build_shopping_list(data_dir, start_iso, end_iso)
    result = {
        "start": start_iso,
        "end": end_iso,
        "filter": status,
        "items": [item.to_dict() for item in filter_shopping_list(items, status)],
    }
    result.update(summarize_shopping_list(items))
    return result


@router.get("/pdf")
def export_shopping_pdf(start: Optional[_date] = Query(default=None), end: Optional[_date] = Query(default=None),
                        status: str = Query(default="all", pattern=STATUS_PATTERN),
                        data_dir: Path = Depends(get_data_dir)):
    start_iso, end_iso = date_range(start, end)
    items = filter_shopping_list(build_shopping_list(data_dir, start_iso, end_iso), status)
    pdf_bytes = generate_pdf_for_shopping_list(items, start_iso, end_iso)
    filename = f"shopping_{start_iso or 'all'}_{end_iso or 'all'}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
