from pathlib import Path
from typing import Any, Dict, List, Optional

from mealplan.domain.HealthPrinciple import HealthPrinciple
from mealplan.infra.json_store import JsonTable
from mealplan.infra.paths import DATA_DIR, HEALTH_PRINCIPLES_FILE


class HealthPrincipleRepository:
    def __init__(self, data_dir: Optional[Path] = None):
        self.table = JsonTable(Path(data_dir or DATA_DIR) / HEALTH_PRINCIPLES_FILE)

    def list_all(self) -> List[HealthPrinciple]:
        """Newest first."""
        principles = [HealthPrinciple.from_dict(row) for row in self.table.all()]
        principles.sort(key=lambda p: p.created_at or "", reverse=True)
        return principles

    def list_enabled(self) -> List[HealthPrinciple]:
        return [p for p in self.list_all() if p.enabled]

    def get(self, principle_id: str) -> Optional[HealthPrinciple]:
        row = self.table.get(principle_id)
        return HealthPrinciple.from_dict(row) if row else None

    def create(self, data: Dict[str, Any]) -> HealthPrinciple:
        return HealthPrinciple.from_dict(self.table.insert(HealthPrinciple.from_dict(data).to_dict()))

    def update(self, principle_id: str, changes: Dict[str, Any]) -> Optional[HealthPrinciple]:
        row = self.table.update(principle_id, changes)
        return HealthPrinciple.from_dict(row) if row else None

    def delete(self, principle_id: str) -> bool:
        return self.table.delete(principle_id)
