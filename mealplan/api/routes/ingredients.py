import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query

from mealplan.infra.Fridge_Repository import FridgeRepository
from mealplan.infra.Ingredient_Repository import IngredientRepository
from mealplan.infra.Meal_Repository import MealRepository
from mealplan.infra.paths import get_data_dir
from mealplan.logic.search.fuzzy import fuzzy_search_ingredients
from mealplan.utilities.config import FUZZY_SEARCH_THRESHOLD
from mealplan.utilities.validators import IngredientInput, IngredientUpdate

router = APIRouter(prefix="/api/ingredients", tags=["ingredients"])
logger = logging.getLogger(__name__)


@router.get("")
def list_ingredients(data_dir: Path = Depends(get_data_dir)):
    return [i.to_dict() for i in IngredientRepository(data_dir).list_all()]


@router.post("", status_code=201)
def create_ingredient(payload: IngredientInput, data_dir: Path = Depends(get_data_dir)):
    repo = IngredientRepository(data_dir)
    if repo.find_by_name(payload.name):
        raise HTTPException(status_code=400, detail="Ingredient with this name already exists")
    return repo.create(payload.model_dump()).to_dict()


# Declared before /{ingredient_id} so "search" is not taken for an id
@router.get("/search")
def search_ingredients(q: str = Query(default=""),
                       threshold: float = Query(default=FUZZY_SEARCH_THRESHOLD, ge=0, le=1),
                       data_dir: Path = Depends(get_data_dir)):
    repo = IngredientRepository(data_dir)
    results = fuzzy_search_ingredients(q, repo.list_all, threshold=threshold)
    return {"results": [i.to_dict() for i in results]}


@router.get("/{ingredient_id}")
def get_ingredient(ingredient_id: str, data_dir: Path = Depends(get_data_dir)):
    ingredient = IngredientRepository(data_dir).get(ingredient_id)
    if ingredient is None:
        raise HTTPException(status_code=404, detail="Ingredient not found")
    return ingredient.to_dict()


@router.put("/{ingredient_id}")
def update_ingredient(ingredient_id: str, payload: IngredientUpdate, data_dir: Path = Depends(get_data_dir)):
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "name" in changes and not changes["name"]:
        raise HTTPException(status_code=400, detail="Ingredient name cannot be empty")
    repo = IngredientRepository(data_dir)
    if "name" in changes:
        existing = repo.find_by_name(changes["name"])
        if existing is not None and existing.id != ingredient_id:
            raise HTTPException(status_code=400, detail="Ingredient with this name already exists")
    ingredient = repo.update(ingredient_id, changes)
    if ingredient is None:
        raise HTTPException(status_code=404, detail="Ingredient not found")
    return ingredient.to_dict()


@router.delete("/{ingredient_id}")
def delete_ingredient(ingredient_id: str, data_dir: Path = Depends(get_data_dir)):
    if not IngredientRepository(data_dir).delete(ingredient_id):
        raise HTTPException(status_code=404, detail="Ingredient not found")
    fridge_rows = FridgeRepository(data_dir).delete_for_ingredient(ingredient_id)
    requirements = MealRepository(data_dir).delete_requirements_for_ingredient(ingredient_id)
    logger.info("Ingredient %s deleted (%d fridge rows, %d meal requirements)",
                ingredient_id, fridge_rows, requirements)
    return {"success": True}
