"""ShoppingItem value: one derived shopping-list line (not persisted)."""
import math
from typing import Any, Optional

from mealplan.utilities.constants import STATUS_IN_STOCK, STATUS_NEED_TO_BUY, STATUS_PARTIAL


def parse_quantity(value: Any) -> Optional[float]:
    '''Return value as a non-negative finite float, or None when it is malformed.'''
    if isinstance(value, bool) or value is None:
        return None
    try:
        q = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(q) or math.isinf(q) or q < 0:
        return None
    return q


def unit_key(unit: Optional[str]) -> str:
    """Units compare case-insensitively, ignoring surrounding blanks."""
    return (unit or "").strip().lower()


def format_quantity(value: float) -> str:
    '''Whole numbers print without a decimal part: 500.0 -> "500", 2.5 -> "2.5".'''
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def classify_status(required_total: float, in_stock: float) -> str:
    if in_stock <= 0:
        return STATUS_NEED_TO_BUY
    if in_stock < required_total:
        return STATUS_PARTIAL
    return STATUS_IN_STOCK


class ShoppingItem:
    def __init__(self, ingredient_id: str, name: str, required_total: float, unit: str, in_stock: float = 0):
        self.ingredient_id = ingredient_id
        self.name = name
        self.required_total = max(required_total, 0)
        self.unit = unit
        self.in_stock = max(in_stock, 0)

    @property
    def status(self) -> str:
        return classify_status(self.required_total, self.in_stock)

    def display_text(self) -> str:
        '''e.g. "1000 g needed (400 g in fridge)"; the fridge part is omitted when nothing is in stock.'''
        text = f"{self._amount(self.required_total)} needed"
        if self.in_stock > 0:
            text += f" ({self._amount(self.in_stock)} in fridge)"
        return text

    def _amount(self, value: float) -> str:
        if not self.unit:
            return format_quantity(value)
        return f"{format_quantity(value)} {self.unit}"

    def sort_key(self):
        return (self.name.casefold(), self.ingredient_id, self.unit)

    def __str__(self) -> str:
        return f"{self.name} - {self.display_text()} - {self.status}"

    __repr__ = __str__

    def to_dict(self):
        return {
            "id": self.ingredient_id,
            "name": self.name,
            "required": self.required_total,
            "unit": self.unit,
            "in_stock": self.in_stock,
            "status": self.status,
            "display": self.display_text(),
        }
