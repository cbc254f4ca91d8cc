"""Core business logic layer.

Subpackages:
- shopping: deriving the shopping list from the plan and the fridge
- search: fuzzy ingredient search
- meals: nutrition, fridge coverage and sorting helpers for meals
"""
__all__ = ["shopping", "search", "meals"]
