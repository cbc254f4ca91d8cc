"""Fridge repository: persisted fridge rows and the stock view used by the shopping list."""
from pathlib import Path
from typing import Any, Dict, List, Optional

from mealplan.domain.Fridge import Fridge, FridgeItem, FridgeStock
from mealplan.infra.json_store import JsonTable
from mealplan.infra.paths import DATA_DIR, FRIDGE_FILE


class FridgeRepository:
    def __init__(self, data_dir: Optional[Path] = None):
        self.table = JsonTable(Path(data_dir or DATA_DIR) / FRIDGE_FILE)

    def load_fridge(self) -> Fridge:
        """Hydrate a Fridge aggregate owned by the caller."""
        return Fridge.from_dict(self.table.all())

    def list_items(self) -> List[FridgeItem]:
        return self.load_fridge().get_items()

    def get(self, item_id: str) -> Optional[FridgeItem]:
        row = self.table.get(item_id)
        return FridgeItem.from_dict(row) if row else None

    def add(self, data: Dict[str, Any]) -> FridgeItem:
        row = self.table.insert(FridgeItem.from_dict(data).to_dict())
        return FridgeItem.from_dict(row)

    def update(self, item_id: str, changes: Dict[str, Any]) -> Optional[FridgeItem]:
        row = self.table.update(item_id, changes)
        return FridgeItem.from_dict(row) if row else None

    def delete(self, item_id: str) -> bool:
        return self.table.delete(item_id)

    def delete_for_ingredient(self, ingredient_id: str) -> int:
        return self.table.delete_where(lambda row: row.get('ingredient_id') == ingredient_id)

    def stock_by_ingredient(self) -> Dict[str, FridgeStock]:
        return self.load_fridge().stock_by_ingredient()

    def get_fridge_stock(self, ingredient_id: str) -> Optional[FridgeStock]:
        return self.load_fridge().get_stock(ingredient_id)
