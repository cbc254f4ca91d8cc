from pathlib import Path

from mealplan.utilities.config import DATA_DIR

# Centralized data file names (single source of truth)
INGREDIENTS_FILE = 'ingredients.json'
FRIDGE_FILE = 'fridge_items.json'
MEALS_FILE = 'meals.json'
MEAL_INGREDIENTS_FILE = 'meal_ingredients.json'
MEAL_RATINGS_FILE = 'meal_ratings.json'
PLAN_FILE = 'meal_plan.json'
HEALTH_PRINCIPLES_FILE = 'health_principles.json'

ALL_FILES = (INGREDIENTS_FILE, FRIDGE_FILE, MEALS_FILE, MEAL_INGREDIENTS_FILE,
             MEAL_RATINGS_FILE, PLAN_FILE, HEALTH_PRINCIPLES_FILE)


def get_data_dir() -> Path:
    """Data directory used by the repositories (FastAPI dependency, overridable in tests)."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    return DATA_DIR


__all__ = ['DATA_DIR', 'INGREDIENTS_FILE', 'FRIDGE_FILE', 'MEALS_FILE', 'MEAL_INGREDIENTS_FILE',
           'MEAL_RATINGS_FILE', 'PLAN_FILE', 'HEALTH_PRINCIPLES_FILE', 'ALL_FILES', 'get_data_dir']
