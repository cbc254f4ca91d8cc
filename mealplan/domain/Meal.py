"""Meal domain entity: description, timings, servings, and its ingredient requirements."""
from typing import List, Optional


class MealIngredient:
    """How much of one ingredient a meal consumes."""

    def __init__(self, id: str = "", meal_id: str = "", ingredient_id: str = "", quantity: float = 0,
                 unit: str = "", ingredient_name: str = "", created_at: str = "", updated_at: str = ""):
        self.id = id
        self.meal_id = meal_id
        self.ingredient_id = ingredient_id
        self.quantity = quantity
        self.unit = unit or ""
        self.ingredient_name = ingredient_name or ""
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.ingredient_name or self.ingredient_id}, {self.quantity} {self.unit}".rstrip()

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "meal_id", "ingredient_id", "quantity", "unit", "ingredient_name",
                   "created_at", "updated_at"}
        return MealIngredient(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "meal_id": self.meal_id,
            "ingredient_id": self.ingredient_id,
            "ingredient_name": self.ingredient_name,
            "quantity": self.quantity,
            "unit": self.unit,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class Meal:
    def __init__(self, id: str = "", name: str = "", description: Optional[str] = None,
                 instructions: Optional[str] = None, prep_time: Optional[int] = None,
                 cook_time: Optional[int] = None, servings: Optional[int] = None,
                 cuisine: Optional[str] = None, image_url: Optional[str] = None,
                 source: Optional[str] = None, ingredients: Optional[List[MealIngredient]] = None,
                 created_at: str = "", updated_at: str = ""):
        self.id = id
        self.name = name
        self.description = description
        self.instructions = instructions
        self.prep_time = prep_time
        self.cook_time = cook_time
        self.servings = servings
        self.cuisine = cuisine
        self.image_url = image_url
        self.source = source
        self.ingredients = ingredients[:] if ingredients else []
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.name} - {self.servings or '?'} servings - {len(self.ingredients)} ingredients"

    __repr__ = __str__

    @staticmethod
    def from_dict(data, ingredients: Optional[List[MealIngredient]] = None):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "name", "description", "instructions", "prep_time", "cook_time", "servings",
                   "cuisine", "image_url", "source", "created_at", "updated_at"}
        return Meal(ingredients=ingredients, **{k: v for k, v in d.items() if k in allowed})

    def to_dict(self, include_ingredients: bool = True):
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "instructions": self.instructions,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "servings": self.servings,
            "cuisine": self.cuisine,
            "image_url": self.image_url,
            "source": self.source,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if include_ingredients:
            data["ingredients"] = [ing.to_dict() for ing in self.ingredients]
        return data


class RatingSummary:
    def __init__(self, likes: int = 0, dislikes: int = 0):
        self.likes = likes
        self.dislikes = dislikes

    @property
    def total(self) -> int:
        return self.likes + self.dislikes

    @staticmethod
    def from_ratings(ratings):
        '''Count likes (rating True) and dislikes (rating False) from stored rating rows.'''
        likes = sum(1 for r in ratings if r.get("rating") is True)
        dislikes = sum(1 for r in ratings if r.get("rating") is False)
        return RatingSummary(likes, dislikes)

    def to_dict(self):
        return {"likes": self.likes, "dislikes": self.dislikes, "total": self.total}
