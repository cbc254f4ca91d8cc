from typing import Final

MEAL_TYPES: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner", "snack")

STATUS_NEED_TO_BUY: Final[str] = "need-to-buy"
STATUS_PARTIAL: Final[str] = "partial"
STATUS_IN_STOCK: Final[str] = "in-stock"
SHOPPING_STATUSES: Final[tuple[str, ...]] = (STATUS_NEED_TO_BUY, STATUS_PARTIAL, STATUS_IN_STOCK)
SHOPPING_FILTER_ALL: Final[str] = "all"

FUZZY_MIN_QUERY_LENGTH: Final[int] = 2
DEFAULT_FUZZY_THRESHOLD: Final[float] = 0.4

# Recommendation prompt limits
PROMPT_MAX_FRIDGE_ITEMS: Final[int] = 15
PROMPT_MAX_RATED_MEALS: Final[int] = 5

RECOMMENDATION_SYSTEM_PROMPT: Final[str] = (
    "You are a chef who creates meal recommendations. Respond with valid JSON only."
)
RECOMMENDATION_JSON_FORMAT: Final[str] = (
    """
{
  "recommendations": [
    {
      "name": str,
      "description": str,
      "instructions": str,
      "prepTime": int,
      "cookTime": int,
      "servings": int,
      "cuisine": str,
      "ingredients": [
        {"name": str, "quantity": number, "unit": str}
      ],
      "nutrition": {
        "calories": number,
        "protein": number,
        "carbs": number,
        "fat": number
      }
    }
  ]
}
    """
)
