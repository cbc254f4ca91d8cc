import unittest

from mealplan.domain.Fridge import Fridge, FridgeStock
from mealplan.domain.Meal import MealIngredient
from mealplan.domain.Plan import PlanEntry
from mealplan.domain.ShoppingItem import ShoppingItem, classify_status, parse_quantity
from mealplan.logic.shopping.list_builder import (
    compute_shopping_list,
    filter_shopping_list,
    stock_available,
    summarize_shopping_list,
)


def _req(meal_id, ingredient_id, quantity, unit="g", name=""):
    return MealIngredient(meal_id=meal_id, ingredient_id=ingredient_id, quantity=quantity,
                          unit=unit, ingredient_name=name)


class TestShoppingItem(unittest.TestCase):

    def test_need_to_buy_when_nothing_in_stock(self):
        item = ShoppingItem("tom", "Tomatoes", 500, "g", 0)
        self.assertEqual(item.status, "need-to-buy")
        self.assertEqual(item.display_text(), "500 g needed")

    def test_partial_when_stock_below_requirement(self):
        item = ShoppingItem("tom", "Tomatoes", 1000, "g", 400)
        self.assertEqual(item.status, "partial")
        self.assertEqual(item.display_text(), "1000 g needed (400 g in fridge)")

    def test_in_stock_when_stock_covers_requirement(self):
        item = ShoppingItem("tom", "Tomatoes", 10, "g", 200)
        self.assertEqual(item.status, "in-stock")
        self.assertEqual(item.display_text(), "10 g needed (200 g in fridge)")

    def test_exact_stock_is_in_stock(self):
        self.assertEqual(classify_status(300, 300), "in-stock")

    def test_blank_unit_display(self):
        item = ShoppingItem("egg", "Eggs", 2.5, "", 1)
        self.assertEqual(item.display_text(), "2.5 needed (1 in fridge)")

    def test_negative_values_clamped(self):
        item = ShoppingItem("x", "X", -5, "g", -1)
        self.assertEqual(item.required_total, 0)
        self.assertEqual(item.in_stock, 0)

    def test_parse_quantity_rejects_malformed(self):
        for value in (None, True, "abc", float("nan"), float("inf"), -1):
            self.assertIsNone(parse_quantity(value), value)
        self.assertEqual(parse_quantity("2.5"), 2.5)
        self.assertEqual(parse_quantity(0), 0.0)


class TestComputeShoppingList(unittest.TestCase):

    def setUp(self):
        self.plan = [
            PlanEntry(id="p1", meal_id="salad", date="2025-01-06", meal_type="lunch"),
            PlanEntry(id="p2", meal_id="soup", date="2025-01-07", meal_type="dinner"),
        ]
        self.requirements = {
            "salad": [_req("salad", "tom", 200, name="Tomatoes"), _req("salad", "cuc", 1, "pcs", "Cucumber")],
            "soup": [_req("soup", "tom", 300, name="Tomatoes"), _req("soup", "oil", 2, "tbsp", "olive oil")],
        }
        self.stock = {
            "tom": FridgeStock("tom", 100, "g"),
            "oil": FridgeStock("oil", 10, "tbsp"),
        }

    def test_empty_plan_gives_empty_list(self):
        self.assertEqual(compute_shopping_list([], self.requirements, self.stock), [])

    def test_quantities_summed_across_meals(self):
        items = compute_shopping_list(self.plan, self.requirements, self.stock)
        tomatoes = [i for i in items if i.ingredient_id == "tom"]
        self.assertEqual(len(tomatoes), 1)
        t = tomatoes[0]
        self.assertEqual(t.name, "Tomatoes")
        self.assertEqual(t.required_total, 500)
        self.assertEqual(t.unit, "g")
        self.assertEqual(t.in_stock, 100)
        self.assertEqual(t.status, "partial")

    def test_same_meal_planned_twice_counts_twice(self):
        plan = self.plan + [PlanEntry(id="p3", meal_id="salad", date="2025-01-08", meal_type="lunch")]
        items = compute_shopping_list(plan, self.requirements, self.stock)
        cucumber = next(i for i in items if i.ingredient_id == "cuc")
        self.assertEqual(cucumber.required_total, 2)
        self.assertEqual(cucumber.status, "need-to-buy")

    def test_idempotent(self):
        first = [i.to_dict() for i in compute_shopping_list(self.plan, self.requirements, self.stock)]
        second = [i.to_dict() for i in compute_shopping_list(self.plan, self.requirements, self.stock)]
        self.assertEqual(first, second)

    def test_sorted_by_name_case_insensitive(self):
        items = compute_shopping_list(self.plan, self.requirements, self.stock)
        self.assertEqual([i.name for i in items], ["Cucumber", "olive oil", "Tomatoes"])

    def test_same_name_ordered_by_id_then_unit(self):
        requirements = {
            "salad": [_req("salad", "b2", 5, "g", "basil"), _req("salad", "b1", 10, "g", "Basil")],
            "soup": [_req("soup", "b1", 2, "leaves", "Basil"), _req("soup", "b1", 3, "bunch", "Basil")],
        }
        items = compute_shopping_list(self.plan, requirements, {})
        self.assertEqual([(i.ingredient_id, i.unit) for i in items],
                         [("b1", "bunch"), ("b1", "g"), ("b1", "leaves"), ("b2", "g")])
        reversed_plan = list(reversed(self.plan))
        self.assertEqual([i.to_dict() for i in compute_shopping_list(reversed_plan, requirements, {})],
                         [i.to_dict() for i in items])

    def test_catalog_names_preferred(self):
        items = compute_shopping_list(self.plan, self.requirements, self.stock, {"oil": "Olive Oil"})
        oil = next(i for i in items if i.ingredient_id == "oil")
        self.assertEqual(oil.name, "Olive Oil")

    def test_missing_meal_and_stock_contribute_zero(self):
        plan = self.plan + [PlanEntry(id="p4", meal_id="deleted", date="2025-01-08", meal_type="lunch")]
        items = compute_shopping_list(plan, self.requirements, {})
        self.assertEqual(len(items), 3)
        self.assertTrue(all(i.in_stock == 0 for i in items))

    def test_malformed_quantities_ignored(self):
        requirements = {
            "salad": [_req("salad", "tom", "lots"), _req("salad", "tom", -20), _req("salad", "tom", 50)],
            "soup": [_req("soup", "salt", None), _req("soup", "pepper", 0)],
        }
        items = compute_shopping_list(self.plan, requirements, {})
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].required_total, 50)

    def test_unit_mismatch_makes_separate_lines(self):
        requirements = {
            "salad": [_req("salad", "milk", 200, "ml", "Milk")],
            "soup": [_req("soup", "milk", 1, "cup", "Milk"), _req("soup", "milk", 100, "ML", "Milk")],
        }
        stock = {"milk": FridgeStock("milk", 250, "ml")}
        items = compute_shopping_list(self.plan, requirements, stock)
        self.assertEqual([(i.unit, i.required_total, i.in_stock) for i in items],
                         [("cup", 1, 0), ("ml", 300, 250)])

    def test_works_with_plain_rows(self):
        plan = [{"meal_id": "m"}]
        requirements = {"m": [{"ingredient_id": "rice", "ingredient_name": "Rice", "quantity": 150, "unit": "g"}]}
        stock = {"rice": {"quantity": 500, "unit": "g"}}
        items = compute_shopping_list(plan, requirements, stock)
        self.assertEqual(items[0].status, "in-stock")

    def test_uses_fridge_aggregate_stock(self):
        fridge = Fridge()
        fridge.add("tom", 60, "g")
        fridge.add("tom", 40, "g")
        items = compute_shopping_list(self.plan, self.requirements, fridge.stock_by_ingredient())
        tomatoes = next(i for i in items if i.ingredient_id == "tom")
        self.assertEqual(tomatoes.in_stock, 100)

    def test_stock_in_other_unit_does_not_hide_matching_stock(self):
        plan = self.plan[:1]
        requirements = {"salad": [_req("salad", "tom", 500, "g", "Tomatoes")]}
        results = []
        for rows in ([(500, "g"), (1, "kg")], [(1, "kg"), (500, "g")]):
            fridge = Fridge()
            for quantity, unit in rows:
                fridge.add("tom", quantity, unit)
            item = compute_shopping_list(plan, requirements, fridge.stock_by_ingredient())[0]
            results.append((item.in_stock, item.status))
        self.assertEqual(results, [(500, "in-stock"), (500, "in-stock")])


class TestFilterAndSummary(unittest.TestCase):

    def setUp(self):
        self.items = [
            ShoppingItem("a", "Apples", 5, "pcs", 0),
            ShoppingItem("b", "Butter", 250, "g", 100),
            ShoppingItem("c", "Carrots", 3, "pcs", 10),
            ShoppingItem("d", "Dill", 10, "g", 0),
        ]

    def test_all_returns_full_list_in_order(self):
        self.assertEqual(filter_shopping_list(self.items, "all"), self.items)

    def test_each_filter_keeps_only_matching_status(self):
        for status in ("need-to-buy", "partial", "in-stock"):
            result = filter_shopping_list(self.items, status)
            self.assertTrue(all(i.status == status for i in result))
        self.assertEqual([i.name for i in filter_shopping_list(self.items, "need-to-buy")], ["Apples", "Dill"])

    def test_unknown_filter_raises(self):
        with self.assertRaises(ValueError):
            filter_shopping_list(self.items, "expired")

    def test_summary_counts(self):
        self.assertEqual(summarize_shopping_list(self.items),
                         {"total_items": 4, "need_to_buy": 2, "partial": 1, "in_stock": 1})

    def test_stock_available_unit_rules(self):
        stock = FridgeStock("x", 100, "G")
        self.assertEqual(stock_available(stock, "g"), 100)
        self.assertEqual(stock_available(stock, "kg"), 0)
        self.assertEqual(stock_available(stock, ""), 100)
        self.assertEqual(stock_available(None, "g"), 0)


if __name__ == "__main__":
    unittest.main()
