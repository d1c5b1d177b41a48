"""Тексты уведомлений бота о пред-заказах."""

from __future__ import annotations

import html
import json
from typing import Any

from menu import format_price

WELCOME_TEXT = (
    "¡Hola, {name}! 👋\n\n"
    "Bienvenido a nuestra cafetería.\n"
    "Pide desde el menú y paga en barra al recoger."
)
MENU_PROMPT = "Toca el botón para abrir el menú:"
OPEN_MENU_BUTTON = "🛒 Abrir menú"


def format_webapp_notice(raw: str) -> str:
    """Ответ пользователю на данные из мини-приложения.

    Бот шлёт сообщения в режиме HTML, поэтому значения из данных экранируются.
    """
    try:
        data: Any = json.loads(raw)
    except (TypeError, ValueError):
        return "❌ No pudimos leer la respuesta del menú. Por favor intenta de nuevo."
    if not isinstance(data, dict):
        return "❌ No pudimos leer la respuesta del menú. Por favor intenta de nuevo."

    action = data.get("action")
    if action == "order_created":
        order_id = html.escape(str(data.get("order_id") or "-"))
        try:
            total = float(data.get("total") or 0)
        except (TypeError, ValueError):
            total = 0.0
        return (
            "✅ ¡Pedido creado exitosamente!\n\n"
            f"📋 Número de pedido: {order_id}\n"
            f"💰 Total: {format_price(total)}\n"
            "💵 Pago en barra\n\n"
            "Favor de pasar a barra a pagar."
        )
    if action == "error":
        message = html.escape(str(data.get("message") or "Ocurrió un error"))
        return f"❌ Error: {message}"
    return "🤔 Acción desconocida."
