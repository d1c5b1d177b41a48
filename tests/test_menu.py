from __future__ import annotations

import math

import pytest

from menu import (
    Category,
    MenuCatalog,
    categorize,
    map_category,
    normalize_product,
    normalize_products,
    organize_by_category,
    parse_price,
)
from menu.categories import CATEGORY_MAP

from .conftest import FakeClient


@pytest.mark.parametrize(
    "value, expected",
    [
        (25.5, 25.5),
        ("25.50", 25.5),
        ("$1,250.00", 1250.0),
        (" $ 45 ", 45.0),
        ("00.00", 0.0),
        ("consultar", 0.0),
        (None, 0.0),
        ("", 0.0),
        (-3, 0.0),
        (True, 0.0),
        ("inf", 0.0),
        ("-Infinity", 0.0),
        (float("inf"), 0.0),
        ("nan", 0.0),
    ],
)
def test_parse_price(value, expected):
    assert parse_price(value) == expected


def test_normalize_spanish_record(products):
    latte = products[1]
    assert latte.id == "1"
    assert latte.name == "Latte"
    assert latte.description == "Espresso con leche"
    assert latte.price == 50.0
    assert latte.capabilities.requires_milk_choice is True
    assert latte.capabilities.requires_extras_choice is False
    assert latte.raw["nombre"] == "Latte"


def test_normalize_english_record():
    product = normalize_product(
        {
            "id": 9,
            "name": "Protein Shake",
            "desc": "One scoop",
            "price": "$60",
            "size": "M",
            "size2": "G",
            "price2": "$70",
            "category": "Bebidas Fitness",
            "requires_protein": "true",
            "image_url": "http://img/9.png",
            "active": True,
        }
    )
    assert product.id == "9"
    assert product.price == 60.0
    assert (product.size, product.size2, product.price2) == ("M", "G", 70.0)
    assert product.capabilities.requires_protein_choice is True
    assert product.image_url == "http://img/9.png"


def test_image_falls_back_to_backend_endpoint():
    product = normalize_product(
        {"id_producto": 4, "nombre": "Té", "tipo_imagen": "image/png"},
        image_base_url="http://backend.test/api/",
    )
    assert product.image_url == "http://backend.test/api/productos/imagen/4"


def test_legacy_aliases_in_dict(products):
    data = products[3].to_dict()
    assert data["id"] == data["id_producto"] == "3"
    assert data["name"] == data["nombre"] == "Frappé Matcha"
    assert data["desc"] == data["descripcion"] == data["description"]
    assert data["precio"] == 45.0
    assert data["precio2"] == 55.0
    assert data["display_price"] == "45"
    assert data["lleva_leche"] is False


def test_zero_price_needs_manual_pricing(products):
    special = products[4]
    assert special.needs_manual_pricing
    assert special.display_price == "Consultar precio"


def test_normalize_products_drops_inactive_and_idless(raw_products):
    rows = raw_products + [{"nombre": "Sin id", "precio": 10}, "basura"]
    ids = [product.id for product in normalize_products(rows)]
    assert ids == ["1", "2", "3", "4"]


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Bebidas Calientes", Category.HOT_DRINKS),
        ("bebidas_calientes", Category.HOT_DRINKS),
        ("BEBIDAS FRÍAS", Category.COLD_DRINKS),
        ("bebidas-frias", Category.COLD_DRINKS),
        ("Shots de Energía", Category.ENERGY_SHOTS),
        ("bebidas_con_proteina", Category.PROTEIN_DRINKS),
        ("Menú Dulce", Category.SWEET),
        ("menu_salado", Category.SAVORY),
        ("  Ensaladas ", Category.SALADS),
        ("Alimentos", Category.SAVORY),
        ("Postres", Category.SWEET),
        ("Bebidas Fitness", Category.ENERGY_SHOTS),
        ("bebidas_fitness", Category.ENERGY_SHOTS),
        ("Tienda", Category.OTHER),
        (None, Category.OTHER),
    ],
)
def test_map_category(label, expected):
    assert map_category(label) is expected
    assert map_category(label) is map_category(label)


def test_category_table_has_accent_and_separator_variants():
    for key in ("menú-dulce", "menu dulce", "menu_dulce", "menú_dulce"):
        assert CATEGORY_MAP[key] is Category.SWEET


def _fitness(name, description, subcategory=None):
    raw = {"id": name, "nombre": name, "descripcion": description, "categoria": "Bebidas Fitness"}
    if subcategory:
        raw["subcategoria"] = subcategory
    return normalize_product(raw)


def test_fitness_split_by_protein_keywords():
    assert categorize(_fitness("Shake", "Con un scoop de vainilla")) is Category.PROTEIN_DRINKS
    assert categorize(_fitness("Batido Proteína", "Fresa")) is Category.PROTEIN_DRINKS
    assert categorize(_fitness("Shot Jengibre", "Jengibre y limón")) is Category.ENERGY_SHOTS


def test_fitness_subcategory_overrides_heuristic():
    product = _fitness("Shot", "con scoop", subcategory="Shots de Energía")
    assert categorize(product) is Category.ENERGY_SHOTS


def test_organize_keeps_order_and_buckets(products):
    organized = organize_by_category(products.values())
    assert [p.id for p in organized[Category.HOT_DRINKS]] == ["1"]
    assert [p.id for p in organized[Category.SAVORY]] == ["2"]
    assert [p.id for p in organized[Category.COLD_DRINKS]] == ["3"]
    assert [p.id for p in organized[Category.SWEET]] == ["5"]
    assert [p.id for p in organized[Category.OTHER]] == ["4"]
    assert set(organized) == set(Category)


@pytest.mark.parametrize("count", [1, 6, 7, 15, 50])
def test_round_robin_when_no_usable_categories(count):
    items = [normalize_product({"id": i, "nombre": f"P{i}"}) for i in range(count)]

    organized = organize_by_category(items)
    again = organize_by_category(items)

    assert organized == again
    assert organized[Category.OTHER] == []
    sizes = [len(bucket) for category, bucket in organized.items() if category is not Category.OTHER]
    assert len(sizes) == 7
    assert sum(sizes) == count
    assert max(sizes) <= math.ceil(count / 7)
    assert min(sizes) >= count // 7
    assert organized[Category.HOT_DRINKS][0].id == "0"


def test_organize_empty():
    assert all(bucket == [] for bucket in organize_by_category([]).values())


def test_catalog_loads_once(fake_client):
    calls = []
    original = fake_client.get_products

    def counting():
        calls.append(1)
        return original()

    fake_client.get_products = counting
    catalog = MenuCatalog(fake_client)

    assert catalog.get("1").name == "Latte"
    assert catalog.get(3).name == "Frappé Matcha"
    assert catalog.get("5") is None
    assert len(calls) == 1
    assert catalog.error is None
    assert catalog.loading is False


def test_catalog_records_error(offline_error):
    client = FakeClient()

    def broken():
        raise offline_error

    client.get_products = broken
    catalog = MenuCatalog(client)

    assert catalog.products == []
    assert "No se pudo conectar" in catalog.error
    assert all(bucket == [] for bucket in catalog.by_category().values())


def test_catalog_discards_stale_response(raw_products):
    client = FakeClient(raw_products)
    catalog = MenuCatalog(client)
    fresh = [{"id_producto": 10, "nombre": "Nuevo", "precio": 10}]

    def slow_then_overtaken():
        # Пока идёт первая загрузка, успевает завершиться вторая
        client.get_products = lambda: fresh
        catalog.refresh()
        return raw_products

    client.get_products = slow_then_overtaken
    catalog.refresh()

    assert [p.id for p in catalog.products] == ["10"]


def test_catalog_retries_after_failed_load(raw_products, offline_error):
    client = FakeClient(raw_products)
    calls = []

    def offline_once():
        calls.append(1)
        if len(calls) == 1:
            raise offline_error
        return list(raw_products)

    client.get_products = offline_once
    catalog = MenuCatalog(client)

    assert catalog.products == []
    assert catalog.error is not None

    assert [p.id for p in catalog.products] == ["1", "2", "3", "4"]
    assert catalog.error is None
    assert len(calls) == 2

    catalog.products
    assert len(calls) == 2
