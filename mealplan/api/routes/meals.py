import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mealplan.infra.Fridge_Repository import FridgeRepository
from mealplan.infra.Ingredient_Repository import IngredientRepository
from mealplan.infra.Meal_Repository import MealRepository
from mealplan.infra.Plan_Repository import PlanRepository
from mealplan.infra.paths import get_data_dir
from mealplan.logic.meals.analysis import (
    apply_meal_sort,
    calculate_fridge_percentage,
    calculate_nutrition,
    calculate_total_time,
    format_time,
)
from mealplan.utilities.validators import (
    MealIngredientInput,
    MealIngredientUpdate,
    MealInput,
    MealUpdate,
    RatingInput,
)

router = APIRouter(prefix="/api/meals", tags=["meals"])
logger = logging.getLogger(__name__)


def meal_payload(meal, catalog, stock):
    """Serialize a meal with catalog names, nutrition, fridge coverage and total time."""
    data = meal.to_dict()
    for ing in data["ingredients"]:
        ingredient = catalog.get(ing["ingredient_id"])
        if ingredient is not None:
            ing["ingredient_name"] = ingredient.name
            ing["ingredient"] = ingredient.to_dict()
    total = calculate_total_time(meal.prep_time, meal.cook_time)
    data["nutrition"] = calculate_nutrition(meal.ingredients, catalog)
    data["fridge_percentage"] = calculate_fridge_percentage(meal.ingredients, stock, catalog)
    data["total_time"] = total
    data["total_time_label"] = format_time(total)
    return data


def _require_meal(repo: MealRepository, meal_id: str):
    meal = repo.get_meal(meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


def _requirement_rows(ingredients, catalog):
    rows = []
    for ing in ingredients:
        ingredient = catalog.get(ing.ingredient_id)
        if ingredient is None:
            raise HTTPException(status_code=400, detail=f"Unknown ingredient: {ing.ingredient_id}")
        rows.append(dict(ing.model_dump(), ingredient_name=ingredient.name))
    return rows


@router.get("")
def list_meals(sort_by: Optional[str] = Query(default=None, pattern="^(name|created|fridge_percentage)$"),
               data_dir: Path = Depends(get_data_dir)):
    catalog = IngredientRepository(data_dir).by_id()
    stock = FridgeRepository(data_dir).stock_by_ingredient()
    meals = [meal_payload(m, catalog, stock) for m in MealRepository(data_dir).list_meals()]
    return apply_meal_sort(meals, sort_by)


@router.post("", status_code=201)
def create_meal(payload: MealInput, data_dir: Path = Depends(get_data_dir)):
    catalog = IngredientRepository(data_dir).by_id()
    rows = _requirement_rows(payload.ingredients, catalog)
    meal = MealRepository(data_dir).create_meal(payload.model_dump(exclude={"ingredients"}), rows)
    return meal_payload(meal, catalog, FridgeRepository(data_dir).stock_by_ingredient())


@router.get("/{meal_id}")
def get_meal(meal_id: str, data_dir: Path = Depends(get_data_dir)):
    meal = _require_meal(MealRepository(data_dir), meal_id)
    catalog = IngredientRepository(data_dir).by_id()
    return meal_payload(meal, catalog, FridgeRepository(data_dir).stock_by_ingredient())


@router.put("/{meal_id}")
def update_meal(meal_id: str, payload: MealUpdate, data_dir: Path = Depends(get_data_dir)):
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "name" in changes and not (changes["name"] or "").strip():
        raise HTTPException(status_code=400, detail="Meal name cannot be empty")
    meal = MealRepository(data_dir).update_meal(meal_id, changes)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    catalog = IngredientRepository(data_dir).by_id()
    return meal_payload(meal, catalog, FridgeRepository(data_dir).stock_by_ingredient())


@router.delete("/{meal_id}")
def delete_meal(meal_id: str, data_dir: Path = Depends(get_data_dir)):
    if not MealRepository(data_dir).delete_meal(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    removed = PlanRepository(data_dir).delete_for_meal(meal_id)
    logger.info("Meal %s deleted (%d plan entries removed)", meal_id, removed)
    return {"success": True}


# --- ingredient requirements ------------------------------------------------
@router.get("/{meal_id}/ingredients")
def list_meal_ingredients(meal_id: str, data_dir: Path = Depends(get_data_dir)):
    meal = _require_meal(MealRepository(data_dir), meal_id)
    return [ing.to_dict() for ing in meal.ingredients]


@router.post("/{meal_id}/ingredients", status_code=201)
def add_meal_ingredient(meal_id: str, payload: MealIngredientInput, data_dir: Path = Depends(get_data_dir)):
    repo = MealRepository(data_dir)
    _require_meal(repo, meal_id)
    ingredient = IngredientRepository(data_dir).get(payload.ingredient_id)
    if ingredient is None:
        raise HTTPException(status_code=404, detail="Ingredient not found")
    if repo.get_requirement(meal_id, payload.ingredient_id) is not None:
        raise HTTPException(status_code=400, detail="Ingredient already added to this meal")
    req = repo.add_requirement(meal_id, dict(payload.model_dump(), ingredient_name=ingredient.name))
    return req.to_dict()


@router.put("/{meal_id}/ingredients/{ingredient_id}")
def update_meal_ingredient(meal_id: str, ingredient_id: str, payload: MealIngredientUpdate,
                           data_dir: Path = Depends(get_data_dir)):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    req = MealRepository(data_dir).update_requirement(meal_id, ingredient_id, changes)
    if req is None:
        raise HTTPException(status_code=404, detail="Meal ingredient not found")
    return req.to_dict()


@router.delete("/{meal_id}/ingredients/{ingredient_id}")
def remove_meal_ingredient(meal_id: str, ingredient_id: str, data_dir: Path = Depends(get_data_dir)):
    if not MealRepository(data_dir).remove_requirement(meal_id, ingredient_id):
        raise HTTPException(status_code=404, detail="Meal ingredient not found")
    return {"success": True}


# --- ratings ----------------------------------------------------------------
@router.get("/{meal_id}/rating")
def get_meal_rating(meal_id: str, data_dir: Path = Depends(get_data_dir)):
    repo = MealRepository(data_dir)
    if not repo.exists(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return repo.rating_summary(meal_id).to_dict()


@router.post("/{meal_id}/rating", status_code=201)
def rate_meal(meal_id: str, payload: RatingInput, data_dir: Path = Depends(get_data_dir)):
    repo = MealRepository(data_dir)
    if not repo.exists(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    repo.add_rating(meal_id, payload.rating)
    return repo.rating_summary(meal_id).to_dict()
