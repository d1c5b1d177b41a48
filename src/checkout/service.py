"""Отправка пред-заказа: граница, на которой ловятся все ошибки API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cafe_api import CafeAPIClient, CafeAPIConnectionError, CafeAPIError
from cart import CartStore

from .composer import compose_preorder, compute_totals
from .models import CheckoutDraft, CheckoutTotals

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "¡Pedido creado! Favor de pasar a barra a pagar."
EMPTY_CART_MESSAGE = "Tu carrito está vacío. Agrega productos del menú."
RETRY_HINT = "Por favor intenta de nuevo."


@dataclass(frozen=True)
class CheckoutOutcome:
    success: bool
    message: str
    order_id: Optional[str] = None
    totals: Optional[CheckoutTotals] = None
    backend_total: Optional[float] = None
    submitted: bool = False

    def to_dict(self) -> dict:
        data = {
            "success": self.success,
            "message": self.message,
            "order_id": self.order_id,
            "total": self.totals.total if self.totals else None,
            "backend_total": self.backend_total,
        }
        if not self.success:
            data["error"] = self.message
        return data


class CheckoutService:
    """Оформление заказа по корзине сессии."""

    def __init__(self, client: CafeAPIClient) -> None:
        self._client = client

    def submit(self, store: CartStore, draft: CheckoutDraft) -> CheckoutOutcome:
        """Отправить пред-заказ.

        Пустая корзина: ничего не отправляем. Отправленные позиции
        списываются только после того, как бэкенд вернул идентификатор
        заказа; добавленные за время запроса остаются в корзине.
        """
        lines = store.lines
        if not lines:
            return CheckoutOutcome(success=False, message=EMPTY_CART_MESSAGE)

        totals = compute_totals(lines)
        request = compose_preorder(lines, draft)

        try:
            result = self._client.create_preorder(request.to_payload())
        except CafeAPIConnectionError as exc:
            return self._failed(str(exc), totals)
        except CafeAPIError as exc:
            logger.error("Пред-заказ не создан: %s", exc)
            return self._failed(f"Error al procesar el pedido: {exc}. {RETRY_HINT}", totals)

        logger.info(
            "Создан пред-заказ %s: %s позиций, итог %.2f",
            result.order_id,
            len(lines),
            totals.total,
        )
        store.remove_lines(lines)
        return CheckoutOutcome(
            success=True,
            message=SUCCESS_MESSAGE,
            order_id=result.order_id,
            totals=totals,
            backend_total=result.total,
            submitted=True,
        )

    @staticmethod
    def _failed(message: str, totals: CheckoutTotals) -> CheckoutOutcome:
        return CheckoutOutcome(success=False, message=message, totals=totals, submitted=True)
