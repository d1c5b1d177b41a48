from __future__ import annotations

import httpx
import pytest

from cafe_api import CafeAPIClient, CafeAPIConnectionError, CafeAPIError, PreorderResult
from cafe_api import api_client


def _respond(monkeypatch, status_code=200, json=None, calls=None, exc=None):
    def fake_request(method, url, **kwargs):
        if calls is not None:
            calls.append((method, url, kwargs))
        if exc is not None:
            raise exc
        return httpx.Response(status_code, json=json, request=httpx.Request(method, url))

    monkeypatch.setattr(api_client.httpx, "request", fake_request)


def test_get_products_hits_list_endpoint(monkeypatch):
    calls = []
    _respond(monkeypatch, json=[{"id_producto": 1}], calls=calls)

    client = CafeAPIClient("http://backend.test/api/")
    assert client.get_products() == [{"id_producto": 1}]

    method, url, kwargs = calls[0]
    assert method == "GET"
    assert url == "http://backend.test/api/productos/ver_productos"
    assert kwargs["timeout"] == 10.0


def test_network_failure_becomes_connection_error(monkeypatch):
    _respond(monkeypatch, exc=httpx.ConnectError("refused"))

    with pytest.raises(CafeAPIConnectionError) as info:
        CafeAPIClient().get_products()
    assert "No se pudo conectar" in str(info.value)


def test_http_error_uses_backend_detail(monkeypatch):
    _respond(monkeypatch, status_code=400, json={"detail": "Producto 9 no existe"})

    with pytest.raises(CafeAPIError) as info:
        CafeAPIClient().create_preorder({"detalles": []})
    assert str(info.value) == "Producto 9 no existe"
    assert info.value.status_code == 400
    assert not isinstance(info.value, CafeAPIConnectionError)


def test_http_error_without_body_gets_generic_message(monkeypatch):
    _respond(monkeypatch, status_code=500)

    with pytest.raises(CafeAPIError) as info:
        CafeAPIClient().get_products()
    assert "500" in str(info.value)


def test_validate_product_checks_presence_and_active_flag(monkeypatch):
    _respond(
        monkeypatch,
        json=[{"id_producto": 1, "activo": 1}, {"id": "2", "activo": 0}, {"id_producto": 3}],
    )
    client = CafeAPIClient()

    assert client.validate_product(1) is True
    assert client.validate_product("1") is True
    assert client.validate_product(2) is False
    assert client.validate_product(3) is True
    assert client.validate_product(99) is False


def test_validate_product_propagates_network_errors(monkeypatch):
    _respond(monkeypatch, exc=httpx.ReadTimeout("slow"))

    with pytest.raises(CafeAPIConnectionError):
        CafeAPIClient().validate_product(1)


def test_create_preorder_posts_payload(monkeypatch):
    calls = []
    _respond(monkeypatch, json={"message": "ok", "id_preorden": 12, "total": "130.5"}, calls=calls)

    result = CafeAPIClient().create_preorder({"nombre_cliente": None, "detalles": []})

    assert result == PreorderResult(order_id="12", total=130.5, message="ok")
    method, url, kwargs = calls[0]
    assert method == "POST"
    assert url.endswith("/preordenes/crear_preorden")
    assert kwargs["json"] == {"nombre_cliente": None, "detalles": []}


@pytest.mark.parametrize("field", ["id_preorden", "id", "preorden_id"])
def test_preorder_result_accepts_id_spellings(field):
    assert PreorderResult.from_dict({field: "A1"}).order_id == "A1"


def test_preorder_without_id_is_an_error(monkeypatch):
    _respond(monkeypatch, json={"message": "creada", "total": 10})

    with pytest.raises(CafeAPIError, match="ID de pre-orden"):
        CafeAPIClient().create_preorder({"detalles": []})


def test_from_env_reads_base_url_and_timeout(monkeypatch):
    monkeypatch.setenv("CAFE_API_BASE_URL", "https://cafe.example.com/api")
    monkeypatch.setenv("CAFE_API_TIMEOUT", "3.5")

    client = CafeAPIClient.from_env()
    assert client.base_url == "https://cafe.example.com/api"


def test_from_env_defaults_to_local_backend(monkeypatch):
    monkeypatch.delenv("CAFE_API_BASE_URL", raising=False)
    monkeypatch.delenv("CAFE_API_TIMEOUT", raising=False)

    assert CafeAPIClient.from_env().base_url == "http://localhost:8000/api"


def test_from_env_rejects_bad_timeout(monkeypatch):
    monkeypatch.setenv("CAFE_API_TIMEOUT", "soon")

    with pytest.raises(CafeAPIError):
        CafeAPIClient.from_env()
