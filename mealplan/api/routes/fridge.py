from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from mealplan.infra.Fridge_Repository import FridgeRepository
from mealplan.infra.Ingredient_Repository import IngredientRepository
from mealplan.infra.paths import get_data_dir
from mealplan.utilities.validators import FridgeItemInput, FridgeItemUpdate

router = APIRouter(prefix="/api/fridge", tags=["fridge"])


def _with_ingredient(item, catalog):
    data = item.to_dict()
    ingredient = catalog.get(item.ingredient_id)
    data["ingredient"] = ingredient.to_dict() if ingredient else None
    return data


def _changes(payload) -> dict:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "expires_at" in changes:
        changes["expires_at"] = changes["expires_at"].isoformat()
    return changes


@router.get("")
def list_fridge_items(data_dir: Path = Depends(get_data_dir)):
    catalog = IngredientRepository(data_dir).by_id()
    return [_with_ingredient(item, catalog) for item in FridgeRepository(data_dir).list_items()]


@router.post("", status_code=201)
def add_fridge_item(payload: FridgeItemInput, data_dir: Path = Depends(get_data_dir)):
    ingredient = IngredientRepository(data_dir).get(payload.ingredient_id)
    if ingredient is None:
        raise HTTPException(status_code=404, detail="Ingredient not found")
    item = FridgeRepository(data_dir).add(_changes(payload))
    return _with_ingredient(item, {ingredient.id: ingredient})


@router.get("/{item_id}")
def get_fridge_item(item_id: str, data_dir: Path = Depends(get_data_dir)):
    item = FridgeRepository(data_dir).get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Fridge item not found")
    return _with_ingredient(item, IngredientRepository(data_dir).by_id())


@router.put("/{item_id}")
def update_fridge_item(item_id: str, payload: FridgeItemUpdate, data_dir: Path = Depends(get_data_dir)):
    changes = _changes(payload)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    catalog = IngredientRepository(data_dir).by_id()
    if "ingredient_id" in changes and changes["ingredient_id"] not in catalog:
        raise HTTPException(status_code=404, detail="Ingredient not found")
    item = FridgeRepository(data_dir).update(item_id, changes)
    if item is None:
        raise HTTPException(status_code=404, detail="Fridge item not found")
    return _with_ingredient(item, catalog)


@router.delete("/{item_id}")
def delete_fridge_item(item_id: str, data_dir: Path = Depends(get_data_dir)):
    if not FridgeRepository(data_dir).delete(item_id):
        raise HTTPException(status_code=404, detail="Fridge item not found")
    return {"success": True}
