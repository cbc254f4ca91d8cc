"""Ingredient catalog repository (file persistence)."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from mealplan.domain.Ingredient import Ingredient
from mealplan.infra.json_store import JsonTable
from mealplan.infra.paths import DATA_DIR, INGREDIENTS_FILE

logger = logging.getLogger(__name__)


class IngredientRepository:
    def __init__(self, data_dir: Optional[Path] = None):
        self.table = JsonTable(Path(data_dir or DATA_DIR) / INGREDIENTS_FILE)

    def list_all(self) -> List[Ingredient]:
        ingredients = [Ingredient.from_dict(row) for row in self.table.all()]
        ingredients.sort(key=lambda i: (i.name.casefold(), i.id))
        return ingredients

    def get(self, ingredient_id: str) -> Optional[Ingredient]:
        row = self.table.get(ingredient_id)
        return Ingredient.from_dict(row) if row else None

    def find_by_name(self, name: str) -> Optional[Ingredient]:
        wanted = (name or '').strip().casefold()
        for row in self.table.all():
            if (row.get('name') or '').strip().casefold() == wanted:
                return Ingredient.from_dict(row)
        return None

    def by_id(self) -> Dict[str, Ingredient]:
        return {i.id: i for i in self.list_all()}

    def names_by_id(self) -> Dict[str, str]:
        return {i.id: i.name for i in self.list_all()}

    def create(self, data: Dict[str, Any]) -> Ingredient:
        row = self.table.insert(Ingredient.from_dict(data).to_dict())
        logger.info("Ingredient created: %s (%s)", row.get('name'), row.get('id'))
        return Ingredient.from_dict(row)

    def update(self, ingredient_id: str, changes: Dict[str, Any]) -> Optional[Ingredient]:
        row = self.table.update(ingredient_id, changes)
        return Ingredient.from_dict(row) if row else None

    def delete(self, ingredient_id: str) -> bool:
        return self.table.delete(ingredient_id)
