import tempfile
import unittest
from pathlib import Path

from mealplan.infra.Fridge_Repository import FridgeRepository
from mealplan.infra.Health_Repository import HealthPrincipleRepository
from mealplan.infra.Meal_Repository import MealRepository
from mealplan.infra.Plan_Repository import PlanRepository


class TestRepositories(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_plan_entries_in_range(self):
        repo = PlanRepository(self.data_dir)
        repo.create({"meal_id": "m1", "date": "2025-01-05", "meal_type": "dinner"})
        repo.create({"meal_id": "m1", "date": "2025-01-06", "meal_type": "dinner"})
        repo.create({"meal_id": "m2", "date": "2025-01-06", "meal_type": "breakfast"})
        repo.create({"meal_id": "m2", "date": "2025-01-13", "meal_type": "lunch"})

        entries = repo.list_plan_entries("2025-01-06", "2025-01-12")
        self.assertEqual([(e.date, e.meal_type) for e in entries],
                         [("2025-01-06", "breakfast"), ("2025-01-06", "dinner")])
        self.assertEqual(len(repo.list_plan_entries()), 4)
        self.assertEqual(len(repo.list_plan_entries(end="2025-01-05")), 1)
        self.assertEqual(repo.delete_for_meal("m2"), 2)

    def test_meal_requirements_and_cascade(self):
        repo = MealRepository(self.data_dir)
        meal = repo.create_meal({"name": "Pancakes"}, [
            {"ingredient_id": "flour", "quantity": 200, "unit": "g", "ingredient_name": "Flour"},
            {"ingredient_id": "milk", "quantity": 300, "unit": "ml", "ingredient_name": "Milk"},
        ])
        requirements = repo.list_ingredient_requirements(meal.id)
        self.assertEqual({r.ingredient_id for r in requirements}, {"flour", "milk"})
        self.assertEqual(set(repo.requirements_by_meal([meal.id])), {meal.id})

        repo.add_rating(meal.id, True)
        self.assertEqual(repo.like_counts(), {meal.id: 1})
        self.assertTrue(repo.delete_meal(meal.id))
        self.assertEqual(repo.list_ingredient_requirements(meal.id), [])
        self.assertEqual(repo.rating_summary(meal.id).total, 0)

    def test_fridge_stock(self):
        repo = FridgeRepository(self.data_dir)
        repo.add({"ingredient_id": "rice", "quantity": 200, "unit": "g"})
        repo.add({"ingredient_id": "rice", "quantity": 300, "unit": "g"})
        self.assertEqual(repo.get_fridge_stock("rice").quantity_on_hand, 500)
        self.assertIsNone(repo.get_fridge_stock("pasta"))

        fridge = repo.load_fridge()
        fridge.clear()
        # the hydrated aggregate is a copy; the stored rows are untouched
        self.assertEqual(len(repo.list_items()), 2)

    def test_enabled_principles(self):
        repo = HealthPrincipleRepository(self.data_dir)
        repo.create({"name": "Low sugar"})
        repo.create({"name": "No fried food", "enabled": False})
        self.assertEqual([p.name for p in repo.list_enabled()], ["Low sugar"])


if __name__ == "__main__":
    unittest.main()
