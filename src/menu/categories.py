"""Раскладка продуктов по восьми разделам меню."""

from __future__ import annotations

import re
import unicodedata
from typing import Dict, Iterable, List, Optional

from .models import NAMED_CATEGORIES, Category, Product

# Категория бэкенда, которая на витрине делится на два раздела
FITNESS_CATEGORY = "bebidas fitness"
PROTEIN_KEYWORDS = ("scoop", "proteína", "proteina")

_CANONICAL_SPELLINGS: Dict[str, Category] = {
    "bebidas calientes": Category.HOT_DRINKS,
    "bebidas frías": Category.COLD_DRINKS,
    "shots de energía": Category.ENERGY_SHOTS,
    "shots energía": Category.ENERGY_SHOTS,
    "bebidas con proteína": Category.PROTEIN_DRINKS,
    "bebidas proteína": Category.PROTEIN_DRINKS,
    "menú dulce": Category.SWEET,
    "menú salado": Category.SAVORY,
    "ensaladas": Category.SALADS,
    # Старые названия категорий бэкенда
    "alimentos": Category.SAVORY,
    "postres": Category.SWEET,
    "otros": Category.OTHER,
}


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _spellings(phrase: str) -> set[str]:
    """Все варианты написания: с ударениями и без, через пробел, дефис, подчёркивание."""
    variants = set()
    for base in (phrase, _strip_accents(phrase)):
        for sep in (" ", "-", "_"):
            variants.add(base.replace(" ", sep))
    return variants


def _build_category_map() -> Dict[str, Category]:
    table: Dict[str, Category] = {}
    for phrase, category in _CANONICAL_SPELLINGS.items():
        for spelling in _spellings(phrase):
            table[spelling] = category
    return table


CATEGORY_MAP = _build_category_map()
FITNESS_SPELLINGS = frozenset(_spellings(FITNESS_CATEGORY))


def normalize_key(label: Optional[str]) -> str:
    return re.sub(r"\s+", " ", (label or "").strip().lower())


def map_category(label: Optional[str]) -> Category:
    """Раздел для текстовой категории; неизвестное уходит в «Otros».

    «Bebidas Fitness» без продукта делить не по чему, поэтому она уходит в
    шоты; по продукту раздел уточняет ``categorize``.
    """
    key = normalize_key(label)
    if key in FITNESS_SPELLINGS:
        return Category.ENERGY_SHOTS
    return CATEGORY_MAP.get(key, Category.OTHER)


def _looks_like_protein(product: Product) -> bool:
    # Эвристика: бэкенд не различает шоты и протеиновые напитки
    haystack = f"{product.description} {product.name}".lower()
    return any(keyword in haystack for keyword in PROTEIN_KEYWORDS)


def categorize(product: Product) -> Category:
    key = normalize_key(product.category)
    if key in FITNESS_SPELLINGS:
        if product.subcategory:
            explicit = CATEGORY_MAP.get(normalize_key(product.subcategory))
            if explicit in (Category.ENERGY_SHOTS, Category.PROTEIN_DRINKS):
                return explicit
        if _looks_like_protein(product):
            return Category.PROTEIN_DRINKS
        return Category.ENERGY_SHOTS
    return CATEGORY_MAP.get(key, Category.OTHER)


def organize_by_category(products: Iterable[Product]) -> Dict[Category, List[Product]]:
    """Разложить продукты по разделам, сохраняя исходный порядок.

    Если всё попало в «Otros», значит бэкенд не прислал пригодных категорий:
    тогда раскладываем по кругу по семи именованным разделам.
    """
    products = list(products)
    organized: Dict[Category, List[Product]] = {category: [] for category in Category}
    if not products:
        return organized

    for product in products:
        organized[categorize(product)].append(product)

    if len(organized[Category.OTHER]) == len(products):
        organized = {category: [] for category in Category}
        for index, product in enumerate(products):
            organized[NAMED_CATEGORIES[index % len(NAMED_CATEGORIES)]].append(product)

    return organized
