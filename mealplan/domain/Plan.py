"""PlanEntry domain entity: one meal scheduled on one date and meal-time slot."""
from typing import Optional

from mealplan.utilities.constants import MEAL_TYPES


class PlanEntry:
    def __init__(self, id: str = "", meal_id: str = "", date: str = "", meal_type: str = "",
                 created_at: str = "", updated_at: str = ""):
        self.id = id
        self.meal_id = meal_id
        self.date = date  # ISO yyyy-mm-dd
        self.meal_type = meal_type
        self.created_at = created_at
        self.updated_at = updated_at

    def in_range(self, start: Optional[str] = None, end: Optional[str] = None) -> bool:
        # ISO dates compare correctly as strings
        if start and self.date < start:
            return False
        if end and self.date > end:
            return False
        return True

    def sort_key(self):
        slot = MEAL_TYPES.index(self.meal_type) if self.meal_type in MEAL_TYPES else len(MEAL_TYPES)
        return (self.date, slot, self.id)

    def __str__(self) -> str:
        return f"{self.date} {self.meal_type}: {self.meal_id}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "meal_id", "date", "meal_type", "created_at", "updated_at"}
        return PlanEntry(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "meal_id": self.meal_id,
            "date": self.date,
            "meal_type": self.meal_type,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
