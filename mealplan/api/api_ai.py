import os
import re
import json
import time
import logging
from json import JSONDecodeError
from pathlib import Path
from typing import List, Optional

from openai import OpenAI
from fastapi import APIRouter, Depends, HTTPException, Query

from mealplan.api.routes.meals import meal_payload
from mealplan.domain.ShoppingItem import format_quantity, parse_quantity
from mealplan.infra.Fridge_Repository import FridgeRepository
from mealplan.infra.Health_Repository import HealthPrincipleRepository
from mealplan.infra.Ingredient_Repository import IngredientRepository
from mealplan.infra.Meal_Repository import MealRepository
from mealplan.infra.paths import get_data_dir
from mealplan.utilities.config import OPENAI_MODEL
from mealplan.utilities.constants import (
    PROMPT_MAX_FRIDGE_ITEMS,
    PROMPT_MAX_RATED_MEALS,
    RECOMMENDATION_JSON_FORMAT,
    RECOMMENDATION_SYSTEM_PROMPT,
)
from mealplan.utilities.validators import RecommendedMealInput

logger = logging.getLogger(__name__)

SAMPLE_RECOMMENDATIONS = [
    {
        "name": "Mediterranean Grilled Chicken Salad",
        "description": "A fresh salad with grilled chicken, greens, tomatoes, cucumber and feta.",
        "instructions": "Grill the chicken. Chop the vegetables. Toss everything with olive oil and top with feta.",
        "prepTime": 15, "cookTime": 15, "servings": 2, "cuisine": "Mediterranean",
        "ingredients": [
            {"name": "Chicken Breast", "quantity": 200, "unit": "g"},
            {"name": "Mixed Greens", "quantity": 150, "unit": "g"},
            {"name": "Cherry Tomatoes", "quantity": 100, "unit": "g"},
            {"name": "Cucumber", "quantity": 1, "unit": "medium"},
            {"name": "Feta Cheese", "quantity": 50, "unit": "g"},
            {"name": "Olive Oil", "quantity": 2, "unit": "tbsp"},
        ],
        "nutrition": {"calories": 350, "protein": 30, "carbs": 10, "fat": 20},
    },
    {
        "name": "Asian Vegetable Stir Fry",
        "description": "Crisp vegetables stir-fried in soy sauce and sesame oil.",
        "instructions": "Slice the vegetables. Stir-fry over high heat in sesame oil, then add soy sauce.",
        "prepTime": 10, "cookTime": 10, "servings": 2, "cuisine": "Asian",
        "ingredients": [
            {"name": "Bell Pepper", "quantity": 1, "unit": "medium"},
            {"name": "Broccoli", "quantity": 150, "unit": "g"},
            {"name": "Carrots", "quantity": 2, "unit": "medium"},
            {"name": "Snap Peas", "quantity": 100, "unit": "g"},
            {"name": "Soy Sauce", "quantity": 2, "unit": "tbsp"},
            {"name": "Sesame Oil", "quantity": 1, "unit": "tbsp"},
        ],
        "nutrition": {"calories": 250, "protein": 8, "carbs": 30, "fat": 12},
    },
    {
        "name": "Italian Pasta Primavera",
        "description": "Pasta with spring vegetables and parmesan.",
        "instructions": "Cook the pasta. Saute the vegetables in olive oil. Combine and finish with parmesan.",
        "prepTime": 15, "cookTime": 15, "servings": 4, "cuisine": "Italian",
        "ingredients": [
            {"name": "Pasta", "quantity": 300, "unit": "g"},
            {"name": "Zucchini", "quantity": 1, "unit": "medium"},
            {"name": "Cherry Tomatoes", "quantity": 200, "unit": "g"},
            {"name": "Bell Pepper", "quantity": 1, "unit": "medium"},
            {"name": "Parmesan Cheese", "quantity": 50, "unit": "g"},
            {"name": "Olive Oil", "quantity": 3, "unit": "tbsp"},
        ],
        "nutrition": {"calories": 450, "protein": 15, "carbs": 65, "fat": 15},
    },
    {
        "name": "Mexican Quinoa Bowl",
        "description": "Quinoa with black beans, corn, tomatoes and avocado.",
        "instructions": "Cook the quinoa. Warm the beans and corn. Assemble with tomatoes, avocado, lime and cilantro.",
        "prepTime": 10, "cookTime": 20, "servings": 2, "cuisine": "Mexican",
        "ingredients": [
            {"name": "Quinoa", "quantity": 150, "unit": "g"},
            {"name": "Black Beans", "quantity": 200, "unit": "g"},
            {"name": "Corn", "quantity": 100, "unit": "g"},
            {"name": "Cherry Tomatoes", "quantity": 100, "unit": "g"},
            {"name": "Avocado", "quantity": 1, "unit": "medium"},
            {"name": "Lime", "quantity": 1, "unit": "medium"},
            {"name": "Cilantro", "quantity": 10, "unit": "g"},
        ],
        "nutrition": {"calories": 400, "protein": 15, "carbs": 60, "fat": 12},
    },
    {
        "name": "Teriyaki Salmon with Vegetables",
        "description": "Baked salmon glazed with teriyaki, served with broccoli and rice.",
        "instructions": "Glaze the salmon and bake. Steam the broccoli. Serve over rice.",
        "prepTime": 15, "cookTime": 20, "servings": 2, "cuisine": "Asian",
        "ingredients": [
            {"name": "Salmon Fillet", "quantity": 300, "unit": "g"},
            {"name": "Teriyaki Sauce", "quantity": 3, "unit": "tbsp"},
            {"name": "Broccoli", "quantity": 200, "unit": "g"},
            {"name": "Rice", "quantity": 150, "unit": "g"},
        ],
        "nutrition": {"calories": 500, "protein": 35, "carbs": 45, "fat": 18},
    },
]


# === Helper: Get OpenAI Client ===
def _get_openai_client():
    """Return an OpenAI client if OPENAI_API_KEY is set, otherwise None."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        return None
    return OpenAI(api_key=api_key)


def sample_recommendations(count: int) -> List[dict]:
    """Built-in recommendations used when the model is unavailable."""
    return [dict(meal) for meal in SAMPLE_RECOMMENDATIONS[:max(count, 0)]]


# === Prompt ===
def build_recommendation_prompt(fridge_items, names, principles, liked_meals, count: int, request: str = "") -> str:
    """Assemble the model prompt from fridge contents, health principles and liked meals."""
    lines = [f"Suggest {count} meals."]
    fridge = []
    for item in fridge_items[:PROMPT_MAX_FRIDGE_ITEMS]:
        amount = " ".join(filter(None, [format_quantity(parse_quantity(item.quantity) or 0), item.unit]))
        fridge.append(f"{names.get(item.ingredient_id, item.ingredient_id)} ({amount})")
    if fridge:
        lines.append("Ingredients available in the fridge: " + ", ".join(fridge) + ".")
    if principles:
        lines.append("Health principles to follow:")
        lines.extend(f"- {p.name}: {p.description}" if p.description else f"- {p.name}" for p in principles)
    if liked_meals:
        lines.append("Meals the user liked: " + ", ".join(liked_meals[:PROMPT_MAX_RATED_MEALS]) + ".")
    if request:
        lines.append("Additional request: " + request.strip())
    lines.append("Prefer meals that use the fridge ingredients. Return JSON in this format:")
    lines.append(RECOMMENDATION_JSON_FORMAT)
    return "\n".join(lines)


# === Recommendation Generation ===
def generate_recommendations(prompt: str, count: int) -> List[dict]:
    """Ask the model for recommendations; fall back to the built-in list."""
    client = _get_openai_client()
    if client is None:
        logger.warning("OPENAI_API_KEY not set, returning sample recommendations.")
        return sample_recommendations(count)

    try:
        response = client.responses.create(
            model=OPENAI_MODEL,
            instructions=RECOMMENDATION_SYSTEM_PROMPT,
            input=prompt,
        )
    except Exception:
        logger.exception("OpenAI request for recommendations failed")
        return sample_recommendations(count)

    parsed = parse_recommendations(response.output_text or "")
    if parsed is None:
        fixed = _request_json_fix(client, response.output_text or "")
        parsed = parse_recommendations(fixed or "")
    if not parsed:
        logger.warning("AI output held no usable recommendations, returning samples")
        return sample_recommendations(count)
    return parsed[:count]


def parse_recommendations(text: str) -> Optional[List[dict]]:
    """Decode model output into a list of recommendation dicts, or None."""
    text = text.strip()
    if not text:
        return None
    try:
        data = json.loads(text)
    except JSONDecodeError:
        candidate = _extract_json_by_balancing(_remove_trailing_commas(_strip_code_fences(text)))
        if not candidate:
            return None
        try:
            data = json.loads(_remove_trailing_commas(candidate))
        except JSONDecodeError:
            logger.exception("Failed to decode extracted JSON from AI output")
            return None

    if isinstance(data, dict):
        data = data.get("recommendations", data.get("meals"))
    if not isinstance(data, list):
        return None
    return [meal for meal in data if isinstance(meal, dict) and meal.get("name")]


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if escape:
            escape = False
            continue
        if in_string:
            if ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            if start is None:
                start = i
            stack.append(ch)
        elif ch in "}]" and stack:
            opening = stack.pop()
            if (opening == "{") != (ch == "}"):
                return None
            if not stack:
                return text[start:i + 1]
    return None


def _request_json_fix(client: OpenAI, previous_output: str) -> Optional[str]:
    """Ask the model to reformat previous_output as strict JSON."""
    try:
        prompt = (
            "The previous response contained meal recommendations but was not valid JSON. "
            "Reformat ONLY the recommendations as valid JSON (no surrounding text) using the same keys. "
            "Here is the original output:\n\n" + previous_output
        )
        resp = client.responses.create(model=OPENAI_MODEL, input=prompt)
        return (resp.output_text or "").strip()
    except Exception:
        logger.exception("Error while requesting AI to fix JSON formatting")
        return None


def filter_recommendations(meals: List[dict], cuisine: Optional[str] = None,
                           max_prep_time: Optional[int] = None) -> List[dict]:
    result = meals
    if cuisine:
        result = [m for m in result if str(m.get("cuisine") or "").lower() == cuisine.lower()]
    if max_prep_time is not None:
        result = [m for m in result if (m.get("prepTime") or 0) <= max_prep_time]
    return result


# === FastAPI Endpoints ===
router = APIRouter(prefix="/api/meals", tags=["recommendations"])


@router.get("/recommendations")
def get_recommendations(page: int = Query(default=1, ge=1), page_size: int = Query(default=6, ge=1, le=50),
                        cuisine: Optional[str] = None, max_prep_time: Optional[int] = Query(default=None, ge=0),
                        request: str = "", data_dir: Path = Depends(get_data_dir)):
    fridge_items = FridgeRepository(data_dir).list_items()
    principles = HealthPrincipleRepository(data_dir).list_enabled()
    meals = MealRepository(data_dir)
    meal_names = {m.id: m.name for m in meals.list_meals()}
    likes = sorted(meals.like_counts().items(), key=lambda kv: -kv[1])
    liked = [meal_names[meal_id] for meal_id, _ in likes if meal_id in meal_names]

    names_by_id = IngredientRepository(data_dir).names_by_id()
    prompt = build_recommendation_prompt(fridge_items, names_by_id, principles, liked, page_size, request)
    filtered = filter_recommendations(generate_recommendations(prompt, page_size), cuisine, max_prep_time)

    start = (page - 1) * page_size
    stamp = int(time.time() * 1000)
    page_items = [dict(meal, id=f"rec-{stamp}-{i}") for i, meal in enumerate(filtered[start:start + page_size])]
    return {
        "recommendations": page_items,
        "total": len(filtered),
        "page": page,
        "page_size": page_size,
    }


@router.post("/save", status_code=201)
def save_recommendation(payload: RecommendedMealInput, data_dir: Path = Depends(get_data_dir)):
    """Store a recommendation as a meal, reusing catalog ingredients by name."""
    ingredients = IngredientRepository(data_dir)
    rows = []
    for ing in payload.ingredients:
        if ing.quantity <= 0:
            logger.warning("Skipping %s with no quantity in saved recommendation", ing.name)
            continue
        ingredient = ingredients.find_by_name(ing.name)
        if ingredient is None:
            ingredient = ingredients.create({"name": ing.name.strip()})
        rows.append({
            "ingredient_id": ingredient.id,
            "ingredient_name": ingredient.name,
            "quantity": ing.quantity,
            "unit": ing.unit,
        })

    data = payload.model_dump(exclude={"ingredients"})
    data["source"] = "ai"
    meal = MealRepository(data_dir).create_meal(data, rows)
    if meal is None:
        raise HTTPException(status_code=500, detail="Failed to save meal")
    return meal_payload(meal, ingredients.by_id(), FridgeRepository(data_dir).stock_by_ingredient())
