import unittest

from mealplan.domain.Fridge import FridgeStock
from mealplan.domain.Ingredient import Ingredient
from mealplan.domain.Meal import MealIngredient
from mealplan.logic.meals.analysis import (
    apply_meal_sort,
    calculate_fridge_percentage,
    calculate_nutrition,
    calculate_total_time,
    format_time,
)


class TestMealAnalysis(unittest.TestCase):

    def setUp(self):
        self.catalog = {
            "rice": Ingredient(id="rice", name="Rice", nutrition={"calories": 130, "protein": 2.7,
                                                                  "carbohydrates": 28, "fat": 0.3}),
            "salt": Ingredient(id="salt", name="Salt", ingredient_type="pantry"),
            "egg": Ingredient(id="egg", name="Egg"),
        }
        self.requirements = [
            MealIngredient(ingredient_id="rice", quantity=200, unit="g"),
            MealIngredient(ingredient_id="salt", quantity=5, unit="g"),
            MealIngredient(ingredient_id="egg", quantity=2, unit="pcs"),
        ]

    def test_nutrition_per_100g(self):
        nutrition = calculate_nutrition(self.requirements, self.catalog)
        self.assertEqual(nutrition, {"calories": 260.0, "protein": 5.4, "carbs": 56.0, "fat": 0.6})

    def test_fridge_percentage(self):
        stock = {
            "rice": FridgeStock("rice", 500, "g"),
            "salt": FridgeStock("salt", 1, "kg"),
            "egg": FridgeStock("egg", 1, "pcs"),
        }
        # rice and salt covered, one egg short
        self.assertEqual(calculate_fridge_percentage(self.requirements, stock, self.catalog), 67)

    def test_fridge_percentage_empty(self):
        self.assertEqual(calculate_fridge_percentage([], {}), 0)
        self.assertEqual(calculate_fridge_percentage(self.requirements, {}, self.catalog), 0)

    def test_time_helpers(self):
        self.assertEqual(calculate_total_time(15, None), 15)
        self.assertEqual(format_time(45), "45m")
        self.assertEqual(format_time(60), "1h")
        self.assertEqual(format_time(80), "1h 20m")

    def test_sorting(self):
        meals = [
            {"name": "b", "created_at": "2025-01-02", "fridge_percentage": 50},
            {"name": "A", "created_at": "2025-01-03", "fridge_percentage": 50},
            {"name": "c", "created_at": "2025-01-01", "fridge_percentage": 90},
        ]
        self.assertEqual([m["name"] for m in apply_meal_sort(meals, "name")], ["A", "b", "c"])
        self.assertEqual([m["name"] for m in apply_meal_sort(meals, "created")], ["A", "b", "c"])
        self.assertEqual([m["name"] for m in apply_meal_sort(meals, "fridge_percentage")], ["c", "b", "A"])
        self.assertEqual(apply_meal_sort(meals, None), meals)


if __name__ == "__main__":
    unittest.main()
