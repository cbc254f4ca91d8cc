"""Fridge aggregate: caller-owned collection of FridgeItem rows and the per-ingredient stock view."""
from typing import Dict, List, Optional
from uuid import uuid4

from mealplan.domain.ShoppingItem import parse_quantity, unit_key as _unit_key


class FridgeItem:
    def __init__(self, id: str = "", ingredient_id: str = "", quantity: float = 0, unit: str = "",
                 expires_at: Optional[str] = None, created_at: str = "", updated_at: str = "",
                 ingredient_name: str = ""):
        self.id = id
        self.ingredient_id = ingredient_id
        self.quantity = quantity
        self.unit = unit or ""
        self.expires_at = expires_at
        self.created_at = created_at
        self.updated_at = updated_at
        self.ingredient_name = ingredient_name

    def __str__(self) -> str:
        label = self.ingredient_name or self.ingredient_id
        parts = [f"{label} - {self.quantity} {self.unit}".rstrip()]
        if self.expires_at:
            parts.append(f"Exp: {self.expires_at}")
        return " - ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "ingredient_id", "quantity", "unit", "expires_at", "created_at", "updated_at"}
        return FridgeItem(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "ingredient_id": self.ingredient_id,
            "quantity": self.quantity,
            "unit": self.unit,
            "expires_at": self.expires_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class FridgeStock:
    """Quantity of one ingredient currently on hand, kept per unit.

    Rows in different units cannot be added up without a conversion table, so
    each unit (case-insensitive) keeps its own total. `unit` and
    `quantity_on_hand` describe the first unit recorded.
    """

    def __init__(self, ingredient_id: str, quantity_on_hand: float = 0, unit: str = ""):
        self.ingredient_id = ingredient_id
        self.by_unit: Dict[str, float] = {}
        self._labels: Dict[str, str] = {}
        self.add(quantity_on_hand, unit)

    def add(self, quantity: float, unit: str = "") -> None:
        key = _unit_key(unit)
        self.by_unit[key] = self.by_unit.get(key, 0) + max(quantity, 0)
        self._labels.setdefault(key, (unit or "").strip())

    @property
    def unit(self) -> str:
        return next(iter(self._labels.values()))

    @property
    def quantity_on_hand(self) -> float:
        return next(iter(self.by_unit.values()))

    def quantity_in(self, unit: str) -> float:
        '''
        Stock usable for a requirement in `unit`. Unit-less rows count for any unit;
        a unit-less requirement uses unit-less rows, or the stock when it is all in one unit.
        '''
        key = _unit_key(unit)
        if key:
            return self.by_unit.get(key, 0) + self.by_unit.get("", 0)
        if "" in self.by_unit:
            return self.by_unit[""]
        if len(self.by_unit) == 1:
            return self.quantity_on_hand
        return 0

    def __str__(self) -> str:
        parts = [f"{qty} {self._labels[key]}".rstrip() for key, qty in self.by_unit.items()]
        return f"{self.ingredient_id}: {', '.join(parts)}"

    __repr__ = __str__

    def to_dict(self):
        return {
            "ingredient_id": self.ingredient_id,
            "quantity": self.quantity_on_hand,
            "unit": self.unit,
            "by_unit": {self._labels[key]: qty for key, qty in self.by_unit.items()},
        }


class Fridge:
    def __init__(self, items: Optional[List[FridgeItem]] = None):
        self.items: List[FridgeItem] = list(items) if items else []

    def add(self, ingredient_id: str, quantity: float, unit: str, expires_at: Optional[str] = None,
            item_id: Optional[str] = None) -> FridgeItem:
        '''
        Adds a row to the fridge and returns it. A fresh id is generated when none is given.
        '''
        item = FridgeItem(id=item_id or uuid4().hex, ingredient_id=ingredient_id,
                          quantity=quantity, unit=unit, expires_at=expires_at)
        self.items.append(item)
        return item

    def get(self, item_id: str) -> Optional[FridgeItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get_items(self) -> List[FridgeItem]:
        '''
        Returns a copy of the fridge rows; mutating the list does not touch the fridge.
        '''
        return list(self.items)

    def update(self, item_id: str, **changes) -> Optional[FridgeItem]:
        '''
        Applies the given field changes to one row. Unknown ids are ignored and return None.
        '''
        item = self.get(item_id)
        if item is None:
            return None
        for key in ("ingredient_id", "quantity", "unit", "expires_at"):
            if key in changes and changes[key] is not None:
                setattr(item, key, changes[key])
        return item

    def delete(self, item_id: str) -> bool:
        before = len(self.items)
        self.items = [i for i in self.items if i.id != item_id]
        return len(self.items) != before

    def clear(self):
        self.items = []
        return self

    def stock_by_ingredient(self) -> Dict[str, FridgeStock]:
        """Collapse rows into one FridgeStock per ingredient.

        Rows of the same ingredient and unit (case-insensitive) are summed; each
        unit keeps its own total, so the result does not depend on row order.
        Malformed or negative quantities count as zero.
        """
        stock: Dict[str, FridgeStock] = {}
        for item in self.items:
            if not item.ingredient_id:
                continue
            qty = parse_quantity(item.quantity) or 0
            current = stock.get(item.ingredient_id)
            if current is None:
                stock[item.ingredient_id] = FridgeStock(item.ingredient_id, qty, item.unit)
            else:
                current.add(qty, item.unit)
        return stock

    def get_stock(self, ingredient_id: str) -> Optional[FridgeStock]:
        return self.stock_by_ingredient().get(ingredient_id)

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Fridge:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def from_dict(cls, data):
        '''
        Builds a Fridge from a list of stored rows.
        '''
        return cls([FridgeItem.from_dict(row) for row in data or []])

    def to_dict(self):
        return [item.to_dict() for item in self.items]
