"""Fuzzy ingredient search used for autocomplete."""
import logging
from typing import Any, Callable, Iterable, List

from fuzzywuzzy import fuzz

from mealplan.utilities.constants import DEFAULT_FUZZY_THRESHOLD, FUZZY_MIN_QUERY_LENGTH

logger = logging.getLogger(__name__)

__all__ = ["fuzzy_search_ingredients", "score_cutoff"]


def score_cutoff(threshold: float) -> int:
    """Map a 0..1 threshold (0 = exact, 1 = anything) onto a 0..100 match score."""
    threshold = min(max(float(threshold), 0.0), 1.0)
    return int(round((1.0 - threshold) * 100))


def _name(ingredient: Any) -> str:
    if isinstance(ingredient, dict):
        return ingredient.get("name") or ""
    return getattr(ingredient, "name", "") or ""


def _id(ingredient: Any) -> str:
    if isinstance(ingredient, dict):
        return str(ingredient.get("id") or "")
    return str(getattr(ingredient, "id", "") or "")


def fuzzy_search_ingredients(query: str, load_catalog: Callable[[], Iterable[Any]],
                             threshold: float = DEFAULT_FUZZY_THRESHOLD) -> List[Any]:
    """Return catalog ingredients whose name approximately matches `query`, best first.

    `load_catalog` is only called once the query is long enough, so short queries
    never reach the backing store.
    """
    q = (query or "").strip()
    if len(q) < FUZZY_MIN_QUERY_LENGTH:
        return []

    cutoff = score_cutoff(threshold)
    scored = []
    for ingredient in load_catalog() or []:
        name = _name(ingredient)
        if not name:
            continue
        # WRatio lower-cases and strips punctuation before comparing
        score = fuzz.WRatio(q, name)
        if score >= cutoff:
            scored.append((score, ingredient))

    scored.sort(key=lambda pair: (-pair[0], _name(pair[1]).casefold(), _id(pair[1])))
    logger.debug("Fuzzy search %r matched %d ingredients (cutoff %d)", q, len(scored), cutoff)
    return [ingredient for _, ingredient in scored]
