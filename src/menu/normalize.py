"""Приведение сырых записей бэкенда к каноническому Product."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Optional

from .models import Product, ProductCapabilities

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "si", "sí", "yes"}


def _first(raw: dict, *keys: str) -> Any:
    """Первое непустое значение среди вариантов имени поля."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _flag(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().lower() in _TRUE_VALUES


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def parse_price(value: Any) -> float:
    """Разобрать цену вида 25.50, "25.50" или "$1,250.00".

    Пустая, битая или отрицательная цена даёт 0.0: такой продукт продаётся
    только с уточнением цены на кассе.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = str(value).replace("$", "").replace(",", "").strip()
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _optional_price(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    price = parse_price(value)
    return price if price > 0 else None


def _prep_time(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def normalize_product(raw: dict, image_base_url: Optional[str] = None) -> Product:
    """Собрать канонический продукт из записи с любыми вариантами полей."""

    product_id = _first(raw, "id_producto", "id")
    if product_id is None:
        raise ValueError("У продукта нет идентификатора")
    product_id = str(product_id)

    image_url = _first(raw, "imagen_url", "image_url", "image", "imagen", "url_imagen")
    if image_url is None and _text(raw.get("tipo_imagen")) and image_base_url:
        image_url = f"{image_base_url.rstrip('/')}/productos/imagen/{product_id}"

    capabilities = ProductCapabilities(
        requires_milk_choice=_flag(_first(raw, "lleva_leche", "requires_milk")),
        requires_extras_choice=_flag(_first(raw, "lleva_extras", "requires_extras")),
        requires_protein_choice=_flag(_first(raw, "lleva_proteina", "requires_protein")),
    )

    category = _first(raw, "categoria", "categoria_id", "category")
    subcategory = _first(raw, "subcategoria", "subcategory")

    return Product(
        id=product_id,
        name=_text(_first(raw, "nombre", "name")),
        description=_text(_first(raw, "descripcion", "desc", "description")),
        price=parse_price(_first(raw, "precio", "price")),
        size=_text(_first(raw, "tamaño", "tamano", "size")) or None,
        size2=_text(_first(raw, "tamaño2", "tamano2", "size2")) or None,
        price2=_optional_price(_first(raw, "precio2", "price2")),
        category=_text(category) or None,
        subcategory=_text(subcategory) or None,
        image_url=image_url,
        active=_flag(_first(raw, "activo", "active"), default=True),
        prep_time=_prep_time(raw.get("tiempo_preparacion")),
        capabilities=capabilities,
        raw=dict(raw),
    )


def normalize_products(rows: Iterable[dict], image_base_url: Optional[str] = None) -> List[Product]:
    """Нормализовать список и отбросить неактивные продукты.

    Бэкенд уже фильтрует по activo=1, но проверяем ещё раз.
    """
    products: List[Product] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            product = normalize_product(row, image_base_url=image_base_url)
        except ValueError:
            logger.warning("Пропущен продукт без идентификатора: %r", row.get("nombre") or row.get("name"))
            continue
        if product.active:
            products.append(product)
    return products
