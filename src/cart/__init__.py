"""Корзина: позиции, модификаторы и хранилище сессии."""

from .models import CartLine, line_key
from .options import EXTRA_PRICE, EXTRAS, MILK_SURCHARGE, MilkType, Preparation, ProteinType
from .store import (
    CartError,
    CartRegistry,
    CartStore,
    ModifierRequiredError,
    PriceRequiredError,
    ProductUnavailableError,
    SizeUnavailableError,
    resolve_price,
)

__all__ = [
    "CartError",
    "CartLine",
    "CartRegistry",
    "CartStore",
    "EXTRAS",
    "EXTRA_PRICE",
    "MILK_SURCHARGE",
    "MilkType",
    "ModifierRequiredError",
    "Preparation",
    "PriceRequiredError",
    "ProductUnavailableError",
    "ProteinType",
    "SizeUnavailableError",
    "line_key",
    "resolve_price",
]
