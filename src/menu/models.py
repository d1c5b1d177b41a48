"""Каноническая модель продукта меню."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Category(str, Enum):
    """Восемь фиксированных разделов меню."""

    HOT_DRINKS = "bebidasCalientes"
    COLD_DRINKS = "bebidasFrias"
    ENERGY_SHOTS = "shotsEnergia"
    PROTEIN_DRINKS = "bebidasProteina"
    SWEET = "menuDulce"
    SAVORY = "menuSalado"
    SALADS = "ensaladas"
    OTHER = "otros"

    @property
    def label(self) -> str:
        return CATEGORY_TITLES[self]


CATEGORY_TITLES = {
    Category.HOT_DRINKS: "Bebidas Calientes",
    Category.COLD_DRINKS: "Bebidas Frías",
    Category.ENERGY_SHOTS: "Shots de Energía",
    Category.PROTEIN_DRINKS: "Bebidas con Proteína",
    Category.SWEET: "Menú Dulce",
    Category.SAVORY: "Menú Salado",
    Category.SALADS: "Ensaladas",
    Category.OTHER: "Otros",
}

# Порядок разделов на странице; «Другое» всегда последним
NAMED_CATEGORIES = (
    Category.HOT_DRINKS,
    Category.COLD_DRINKS,
    Category.ENERGY_SHOTS,
    Category.PROTEIN_DRINKS,
    Category.SWEET,
    Category.SAVORY,
    Category.SALADS,
)


@dataclass(frozen=True)
class ProductCapabilities:
    """Какие модификаторы нужно выбрать для продукта."""

    requires_milk_choice: bool = False
    requires_extras_choice: bool = False
    requires_protein_choice: bool = False


@dataclass(frozen=True)
class Product:
    """Продукт в каноническом виде, независимом от формата бэкенда."""

    id: str
    name: str
    description: str = ""
    price: float = 0.0  # 0.0: цену нужно уточнить на кассе
    size: Optional[str] = None
    size2: Optional[str] = None
    price2: Optional[float] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    image_url: Optional[str] = None
    active: bool = True
    prep_time: Optional[int] = None
    capabilities: ProductCapabilities = field(default_factory=ProductCapabilities)
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def needs_manual_pricing(self) -> bool:
        return self.price <= 0

    @property
    def display_price(self) -> str:
        """Цена для витрины: без копеек, если цена целая."""
        if self.needs_manual_pricing:
            return "Consultar precio"
        return format_amount(self.price)

    def to_dict(self) -> dict[str, Any]:
        """Канонические ключи плюс старые псевдонимы для шаблонов."""
        caps = self.capabilities
        return {
            "id": self.id,
            "id_producto": self.id,
            "name": self.name,
            "nombre": self.name,
            "description": self.description,
            "desc": self.description,
            "descripcion": self.description,
            "price": self.price,
            "precio": self.price,
            "display_price": self.display_price,
            "price2": self.price2,
            "precio2": self.price2,
            "size": self.size,
            "tamaño": self.size,
            "size2": self.size2,
            "tamaño2": self.size2,
            "category": self.category,
            "categoria": self.category,
            "subcategory": self.subcategory,
            "image_url": self.image_url,
            "image": self.image_url,
            "imagen": self.image_url,
            "url_imagen": self.image_url,
            "active": self.active,
            "activo": self.active,
            "tiempo_preparacion": self.prep_time,
            "requires_milk_choice": caps.requires_milk_choice,
            "lleva_leche": caps.requires_milk_choice,
            "requires_extras_choice": caps.requires_extras_choice,
            "lleva_extras": caps.requires_extras_choice,
            "requires_protein_choice": caps.requires_protein_choice,
            "lleva_proteina": caps.requires_protein_choice,
            "needs_manual_pricing": self.needs_manual_pricing,
        }


def format_amount(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.2f}"


def format_price(value: float) -> str:
    """Сумма в песо для пользователя: $1,234.50."""
    return f"${value:,.2f}"
