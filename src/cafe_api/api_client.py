"""Клиент REST-бэкенда кафе: меню и пред-заказы."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx
from dotenv import load_dotenv


DEFAULT_API_BASE_URL = "http://localhost:8000/api"
ENV_VAR_BASE_URL = "CAFE_API_BASE_URL"
ENV_VAR_TIMEOUT = "CAFE_API_TIMEOUT"

# Бэкенд называет идентификатор пред-заказа по-разному в разных версиях
ORDER_ID_FIELDS = ("id_preorden", "id", "preorden_id")

load_dotenv()

logger = logging.getLogger(__name__)


class CafeAPIError(Exception):
    """Базовое исключение для ошибок при обращении к бэкенду кафе."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CafeAPIConnectionError(CafeAPIError):
    """Сервер недоступен (таймаут, DNS, обрыв соединения)."""


@dataclass(frozen=True)
class PreorderResult:
    """Ответ бэкенда на создание пред-заказа."""

    order_id: str
    total: Optional[float] = None
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "PreorderResult":
        order_id = next(
            (data[field] for field in ORDER_ID_FIELDS if data.get(field) not in (None, "")),
            None,
        )
        if order_id is None:
            raise CafeAPIError("No se recibió un ID de pre-orden válido")

        total = data.get("total")
        try:
            total = float(total) if total is not None else None
        except (TypeError, ValueError):
            total = None

        return cls(order_id=str(order_id), total=total, message=data.get("message"))


class CafeAPIClient:
    """Клиент для обращения к бэкенду кафе."""

    def __init__(self, base_url: str = DEFAULT_API_BASE_URL, *, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    @classmethod
    def from_env(
        cls,
        *,
        env_var: str = ENV_VAR_BASE_URL,
        timeout_var: str = ENV_VAR_TIMEOUT,
    ) -> "CafeAPIClient":
        """Создать клиента, считав адрес бэкенда из .env / переменных окружения."""

        base_url = os.getenv(env_var) or DEFAULT_API_BASE_URL
        raw_timeout = os.getenv(timeout_var)
        try:
            timeout = float(raw_timeout) if raw_timeout else 10.0
        except ValueError as exc:
            raise CafeAPIError(
                f"Некорректное значение {timeout_var}={raw_timeout!r}: ожидается число секунд."
            ) from exc
        return cls(base_url=base_url, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Базовый метод выполнения HTTP-запроса к API."""

        url = f"{self._base_url}{path}"
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

        try:
            response = httpx.request(
                method,
                url,
                headers=headers,
                timeout=self._timeout,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            logger.error("Ошибка сети при запросе %s %s: %s", method, url, exc)
            raise CafeAPIConnectionError(
                "No se pudo conectar con el servidor. Revisa tu conexión e intenta de nuevo."
            ) from exc

        if not response.is_success:
            detail = _error_detail(response)
            logger.error("Ошибка ответа API %s %s: %s %s", method, url, response.status_code, detail)
            raise CafeAPIError(
                detail or f"El servidor respondió con un error ({response.status_code})",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise CafeAPIError(
                "Respuesta inválida del servidor", status_code=response.status_code
            ) from exc

    def get_products(self) -> List[dict]:
        """Получить сырой список продуктов меню."""

        payload = self._request("GET", "/productos/ver_productos")
        if not isinstance(payload, list):
            raise CafeAPIError("Error al obtener los productos: se esperaba una lista")
        return payload

    def validate_product(self, product_id: Any) -> bool:
        """Проверить, что продукт существует и активен.

        Отдельного эндпоинта нет: ищем продукт в общем списке.
        Ошибки сети пробрасываются, решение о fail-open принимает корзина.
        """

        for row in self.get_products():
            row_id = row.get("id_producto", row.get("id"))
            if row_id is not None and str(row_id) == str(product_id):
                return row.get("activo", row.get("active", True)) not in (False, 0, "0")
        return False

    def create_preorder(self, payload: dict) -> PreorderResult:
        """
        Создать пред-заказ (оплата на кассе).

        Args:
            payload: Тело запроса в формате PreordenCreate
                (nombre_cliente, detalles, tipo_servicio, comentarios, extra_leche)

        Returns:
            PreorderResult с идентификатором пред-заказа и итогом бэкенда
        """

        data = self._request("POST", "/preordenes/crear_preorden", json=payload)
        if not isinstance(data, dict):
            raise CafeAPIError("No se recibió un ID de pre-orden válido")
        return PreorderResult.from_dict(data)


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("message")
        if isinstance(detail, str):
            return detail
        if detail:
            return str(detail)
    return None
