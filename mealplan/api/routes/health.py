from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from mealplan.infra.Health_Repository import HealthPrincipleRepository
from mealplan.infra.paths import get_data_dir
from mealplan.utilities.validators import HealthPrincipleInput, HealthPrincipleUpdate

router = APIRouter(prefix="/api/health/principles", tags=["health"])


@router.get("")
def list_principles(data_dir: Path = Depends(get_data_dir)):
    return [p.to_dict() for p in HealthPrincipleRepository(data_dir).list_all()]


@router.post("", status_code=201)
def create_principle(payload: HealthPrincipleInput, data_dir: Path = Depends(get_data_dir)):
    return HealthPrincipleRepository(data_dir).create(payload.model_dump()).to_dict()


@router.get("/{principle_id}")
def get_principle(principle_id: str, data_dir: Path = Depends(get_data_dir)):
    principle = HealthPrincipleRepository(data_dir).get(principle_id)
    if principle is None:
        raise HTTPException(status_code=404, detail="Health principle not found")
    return principle.to_dict()


@router.put("/{principle_id}")
def update_principle(principle_id: str, payload: HealthPrincipleUpdate, data_dir: Path = Depends(get_data_dir)):
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "name" in changes and not (changes["name"] or "").strip():
        raise HTTPException(status_code=400, detail="Name is required")
    principle = HealthPrincipleRepository(data_dir).update(principle_id, changes)
    if principle is None:
        raise HTTPException(status_code=404, detail="Health principle not found")
    return principle.to_dict()


@router.delete("/{principle_id}")
def delete_principle(principle_id: str, data_dir: Path = Depends(get_data_dir)):
    if not HealthPrincipleRepository(data_dir).delete(principle_id):
        raise HTTPException(status_code=404, detail="Health principle not found")
    return {"success": True}
