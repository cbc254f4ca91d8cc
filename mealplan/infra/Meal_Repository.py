"""Meal repository: meals, their ingredient requirements and like/dislike ratings."""
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from mealplan.domain.Meal import Meal, MealIngredient, RatingSummary
from mealplan.infra.json_store import JsonTable
from mealplan.infra.paths import DATA_DIR, MEALS_FILE, MEAL_INGREDIENTS_FILE, MEAL_RATINGS_FILE

logger = logging.getLogger(__name__)


class MealRepository:
    def __init__(self, data_dir: Optional[Path] = None):
        base = Path(data_dir or DATA_DIR)
        self.meals = JsonTable(base / MEALS_FILE)
        self.requirements = JsonTable(base / MEAL_INGREDIENTS_FILE)
        self.ratings = JsonTable(base / MEAL_RATINGS_FILE)

    # --- meals -------------------------------------------------------------
    def list_meals(self) -> List[Meal]:
        by_meal = self.requirements_by_meal()
        return [Meal.from_dict(row, by_meal.get(row.get('id'), [])) for row in self.meals.all()]

    def get_meal(self, meal_id: str) -> Optional[Meal]:
        row = self.meals.get(meal_id)
        if not row:
            return None
        return Meal.from_dict(row, self.list_ingredient_requirements(meal_id))

    def exists(self, meal_id: str) -> bool:
        return self.meals.get(meal_id) is not None

    def create_meal(self, data: Dict[str, Any], ingredients: Iterable[Dict[str, Any]] = ()) -> Meal:
        '''Insert a meal and its ingredient requirements.'''
        row = self.meals.insert(Meal.from_dict(data).to_dict(include_ingredients=False))
        self.requirements.insert_many([
            MealIngredient.from_dict(dict(ing, meal_id=row['id'])).to_dict() for ing in ingredients
        ])
        logger.info("Meal created: %s (%s)", row.get('name'), row.get('id'))
        return self.get_meal(row['id'])

    def update_meal(self, meal_id: str, changes: Dict[str, Any]) -> Optional[Meal]:
        if self.meals.update(meal_id, changes) is None:
            return None
        return self.get_meal(meal_id)

    def delete_meal(self, meal_id: str) -> bool:
        '''Delete a meal with its requirements and ratings.'''
        if not self.meals.delete(meal_id):
            return False
        self.requirements.delete_where(lambda row: row.get('meal_id') == meal_id)
        self.ratings.delete_where(lambda row: row.get('meal_id') == meal_id)
        return True

    # --- requirements ------------------------------------------------------
    def list_ingredient_requirements(self, meal_id: str) -> List[MealIngredient]:
        return [MealIngredient.from_dict(row)
                for row in self.requirements.find(lambda row: row.get('meal_id') == meal_id)]

    def requirements_by_meal(self, meal_ids: Optional[Iterable[str]] = None) -> Dict[str, List[MealIngredient]]:
        wanted = set(meal_ids) if meal_ids is not None else None
        grouped: Dict[str, List[MealIngredient]] = defaultdict(list)
        for row in self.requirements.all():
            meal_id = row.get('meal_id')
            if wanted is not None and meal_id not in wanted:
                continue
            grouped[meal_id].append(MealIngredient.from_dict(row))
        return dict(grouped)

    def get_requirement(self, meal_id: str, ingredient_id: str) -> Optional[MealIngredient]:
        for req in self.list_ingredient_requirements(meal_id):
            if req.ingredient_id == ingredient_id:
                return req
        return None

    def add_requirement(self, meal_id: str, data: Dict[str, Any]) -> MealIngredient:
        row = self.requirements.insert(MealIngredient.from_dict(dict(data, meal_id=meal_id)).to_dict())
        return MealIngredient.from_dict(row)

    def update_requirement(self, meal_id: str, ingredient_id: str, changes: Dict[str, Any]) -> Optional[MealIngredient]:
        req = self.get_requirement(meal_id, ingredient_id)
        if req is None:
            return None
        row = self.requirements.update(req.id, changes)
        return MealIngredient.from_dict(row) if row else None

    def remove_requirement(self, meal_id: str, ingredient_id: str) -> bool:
        removed = self.requirements.delete_where(
            lambda row: row.get('meal_id') == meal_id and row.get('ingredient_id') == ingredient_id)
        return removed > 0

    def delete_requirements_for_ingredient(self, ingredient_id: str) -> int:
        return self.requirements.delete_where(lambda row: row.get('ingredient_id') == ingredient_id)

    # --- ratings -----------------------------------------------------------
    def add_rating(self, meal_id: str, rating: bool) -> Dict[str, Any]:
        return self.ratings.insert({'meal_id': meal_id, 'rating': bool(rating)})

    def rating_summary(self, meal_id: str) -> RatingSummary:
        return RatingSummary.from_ratings(self.ratings.find(lambda row: row.get('meal_id') == meal_id))

    def like_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = defaultdict(int)
        for row in self.ratings.all():
            if row.get('rating') is True:
                counts[row.get('meal_id')] += 1
        return dict(counts)
