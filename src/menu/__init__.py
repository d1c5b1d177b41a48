"""Меню кафе: нормализация продуктов и разделы."""

from .catalog import MenuCatalog
from .categories import categorize, map_category, organize_by_category
from .models import Category, Product, ProductCapabilities, format_price
from .normalize import normalize_product, normalize_products, parse_price

__all__ = [
    "Category",
    "MenuCatalog",
    "Product",
    "ProductCapabilities",
    "categorize",
    "format_price",
    "map_category",
    "normalize_product",
    "normalize_products",
    "organize_by_category",
    "parse_price",
]
