from pathlib import Path
from typing import Any, Dict, List, Optional

from mealplan.domain.Plan import PlanEntry
from mealplan.infra.json_store import JsonTable
from mealplan.infra.paths import DATA_DIR, PLAN_FILE


class PlanRepository:
    def __init__(self, data_dir: Optional[Path] = None):
        self.table = JsonTable(Path(data_dir or DATA_DIR) / PLAN_FILE)

    def list_plan_entries(self, start: Optional[str] = None, end: Optional[str] = None) -> List[PlanEntry]:
        """Plan entries between start and end (ISO dates, inclusive), ordered by date then slot.

        Either bound may be omitted.
        """
        entries = [PlanEntry.from_dict(row) for row in self.table.all()]
        entries = [e for e in entries if e.in_range(start, end)]
        entries.sort(key=lambda e: e.sort_key())
        return entries

    def get(self, entry_id: str) -> Optional[PlanEntry]:
        row = self.table.get(entry_id)
        return PlanEntry.from_dict(row) if row else None

    def create(self, data: Dict[str, Any]) -> PlanEntry:
        return PlanEntry.from_dict(self.table.insert(PlanEntry.from_dict(data).to_dict()))

    def update(self, entry_id: str, changes: Dict[str, Any]) -> Optional[PlanEntry]:
        row = self.table.update(entry_id, changes)
        return PlanEntry.from_dict(row) if row else None

    def delete(self, entry_id: str) -> bool:
        return self.table.delete(entry_id)

    def delete_for_meal(self, meal_id: str) -> int:
        return self.table.delete_where(lambda row: row.get('meal_id') == meal_id)
