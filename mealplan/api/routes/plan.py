from datetime import date as _date
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mealplan.infra.Meal_Repository import MealRepository
from mealplan.infra.Plan_Repository import PlanRepository
from mealplan.infra.paths import get_data_dir
from mealplan.utilities.validators import PlanEntryInput, PlanEntryUpdate

router = APIRouter(prefix="/api/plan", tags=["plan"])


def date_range(start: Optional[_date], end: Optional[_date]):
    """Validate an optional date window and return it as ISO strings."""
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    return (start.isoformat() if start else None, end.isoformat() if end else None)


def _with_meal(entry, meals_by_id):
    data = entry.to_dict()
    meal = meals_by_id.get(entry.meal_id)
    data["meal"] = {
        "id": meal.id,
        "name": meal.name,
        "description": meal.description,
        "image_url": meal.image_url,
    } if meal else None
    return data


def _changes(payload) -> dict:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "date" in changes:
        changes["date"] = changes["date"].isoformat()
    return changes


@router.get("")
def list_plan(start: Optional[_date] = Query(default=None), end: Optional[_date] = Query(default=None),
              data_dir: Path = Depends(get_data_dir)):
    start_iso, end_iso = date_range(start, end)
    meals_by_id = {m.id: m for m in MealRepository(data_dir).list_meals()}
    entries = PlanRepository(data_dir).list_plan_entries(start_iso, end_iso)
    return [_with_meal(e, meals_by_id) for e in entries]


@router.post("", status_code=201)
def create_plan_entry(payload: PlanEntryInput, data_dir: Path = Depends(get_data_dir)):
    meal = MealRepository(data_dir).get_meal(payload.meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    entry = PlanRepository(data_dir).create(_changes(payload))
    return _with_meal(entry, {meal.id: meal})


@router.get("/{entry_id}")
def get_plan_entry(entry_id: str, data_dir: Path = Depends(get_data_dir)):
    entry = PlanRepository(data_dir).get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Plan entry not found")
    meal = MealRepository(data_dir).get_meal(entry.meal_id)
    return _with_meal(entry, {meal.id: meal} if meal else {})


@router.put("/{entry_id}")
def update_plan_entry(entry_id: str, payload: PlanEntryUpdate, data_dir: Path = Depends(get_data_dir)):
    changes = _changes(payload)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    meals = MealRepository(data_dir)
    if "meal_id" in changes and not meals.exists(changes["meal_id"]):
        raise HTTPException(status_code=404, detail="Meal not found")
    entry = PlanRepository(data_dir).update(entry_id, changes)
    if entry is None:
        raise HTTPException(status_code=404, detail="Plan entry not found")
    meal = meals.get_meal(entry.meal_id)
    return _with_meal(entry, {meal.id: meal} if meal else {})


@router.delete("/{entry_id}")
def delete_plan_entry(entry_id: str, data_dir: Path = Depends(get_data_dir)):
    if not PlanRepository(data_dir).delete(entry_id):
        raise HTTPException(status_code=404, detail="Plan entry not found")
    return {"success": True}
