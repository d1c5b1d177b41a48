"""Модели корзины."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Optional

from menu import Product

from .options import MilkType, Preparation, ProteinType


def line_key(
    product_id: str,
    size: str,
    preparation: Optional[Preparation] = None,
    milk_type: Optional[MilkType] = None,
    extras: tuple[str, ...] = (),
    protein_type: Optional[ProteinType] = None,
) -> str:
    """Структурный ключ позиции: одинаковая конфигурация даёт одинаковый ключ."""
    parts = [
        str(product_id),
        size,
        preparation.value if preparation else "",
        milk_type.value if milk_type else "",
        ",".join(sorted(extras)),
        protein_type.value if protein_type else "",
    ]
    return hashlib.sha1("|".join(parts).encode("utf-8")).hexdigest()[:16]


@dataclass
class CartLine:
    """Позиция корзины: продукт с выбранными модификаторами и количеством."""

    line_id: str
    product_id: str
    name: str
    unit_price: float
    size: str
    quantity: int = 1
    description: str = ""
    preparation: Optional[Preparation] = None
    milk_type: Optional[MilkType] = None
    extras: tuple[str, ...] = ()
    protein_type: Optional[ProteinType] = None
    category: Optional[str] = None
    requires_milk: bool = False
    requires_extras: bool = False
    product: Optional[Product] = field(default=None, compare=False, repr=False)

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)

    def to_dict(self) -> dict:
        return {
            "id": self.line_id,
            "product_id": self.product_id,
            "name": self.name,
            "description": self.description,
            "price": self.unit_price,
            "size": self.size,
            "quantity": self.quantity,
            "preparation": self.preparation.value if self.preparation else None,
            "milk_type": self.milk_type.value if self.milk_type else None,
            "extras": list(self.extras),
            "protein_type": self.protein_type.value if self.protein_type else None,
            "category": self.category,
            "line_total": self.line_total,
        }
