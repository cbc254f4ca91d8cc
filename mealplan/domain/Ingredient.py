"""Ingredient catalog entity: name, type (regular/pantry), nutrition per 100 g, image."""
from typing import Dict, Optional

NUTRIENTS = ("calories", "protein", "carbs", "fat")


class Ingredient:
    def __init__(self, id: str = "", name: str = "", ingredient_type: str = "regular",
                 nutrition: Optional[Dict[str, float]] = None, image_url: Optional[str] = None,
                 created_at: str = "", updated_at: str = ""):
        self.id = id
        self.name = name
        self.ingredient_type = ingredient_type or "regular"
        n = nutrition or {}
        # Normalize key synonyms
        self.nutrition = {
            "calories": n.get("calories", 0) or 0,
            "protein": n.get("protein", 0) or 0,
            "carbs": n.get("carbs", n.get("carbohydrates", 0)) or 0,
            "fat": n.get("fat", n.get("fats", 0)) or 0,
        } if nutrition else None
        self.image_url = image_url
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.name} ({self.ingredient_type})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient from a stored row. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "name", "ingredient_type", "nutrition", "image_url", "created_at", "updated_at"}
        return Ingredient(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "ingredient_type": self.ingredient_type,
            "nutrition": dict(self.nutrition) if self.nutrition else None,
            "image_url": self.image_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
