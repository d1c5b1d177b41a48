from __future__ import annotations

import pytest

from cafe_api import CafeAPIConnectionError, CafeAPIError, PreorderResult
from menu import normalize_product

RAW_PRODUCTS = [
    {
        "id_producto": 1,
        "nombre": "Latte",
        "descripcion": "Espresso con leche",
        "precio": "50.00",
        "categoria": "Bebidas Calientes",
        "lleva_leche": 1,
        "activo": 1,
    },
    {
        "id_producto": 2,
        "nombre": "Sando de huevo",
        "descripcion": "Pan blanco sin orillas",
        "precio": 30,
        "categoria": "menu-salado",
        "lleva_extras": True,
        "activo": 1,
    },
    {
        "id_producto": 3,
        "nombre": "Frappé Matcha",
        "descripcion": "Matcha frío",
        "precio": "$45.00",
        "tamaño": "M",
        "tamaño2": "G",
        "precio2": "$55.00",
        "categoria": "Bebidas Frías",
        "activo": 1,
    },
    {
        "id_producto": 4,
        "nombre": "Especial del día",
        "precio": "00.00",
        "categoria": "Otros",
        "activo": 1,
    },
    {
        "id_producto": 5,
        "nombre": "Pastel viejo",
        "precio": 40,
        "categoria": "Postres",
        "activo": 0,
    },
]


@pytest.fixture
def raw_products():
    return [dict(row) for row in RAW_PRODUCTS]


@pytest.fixture
def products(raw_products):
    return {row["id_producto"]: normalize_product(row) for row in raw_products}


class FakeClient:
    """Подмена CafeAPIClient без сети."""

    base_url = "http://backend.test/api"

    def __init__(self, rows=None, *, validate=True, order_response=None, order_error=None):
        self.rows = list(rows or [])
        self.validate = validate
        self.order_response = order_response or {"id_preorden": 77, "total": 130}
        self.order_error = order_error
        self.validated = []
        self.payloads = []

    def get_products(self):
        return list(self.rows)

    def validate_product(self, product_id):
        self.validated.append(product_id)
        if isinstance(self.validate, Exception):
            raise self.validate
        return self.validate

    def create_preorder(self, payload):
        self.payloads.append(payload)
        if self.order_error is not None:
            raise self.order_error
        return PreorderResult.from_dict(self.order_response)


@pytest.fixture
def fake_client(raw_products):
    return FakeClient(raw_products)


@pytest.fixture
def offline_error():
    return CafeAPIConnectionError("No se pudo conectar con el servidor. Revisa tu conexión e intenta de nuevo.")


@pytest.fixture
def http_error():
    return CafeAPIError("Producto inexistente", status_code=422)
