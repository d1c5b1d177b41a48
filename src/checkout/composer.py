"""Расчёт итогов и сборка пред-заказа из корзины."""

from __future__ import annotations

from typing import Iterable, Optional

from cart import EXTRA_PRICE, MILK_SURCHARGE, CartLine
from cart.options import extra_name

from .models import CheckoutDraft, CheckoutTotals, PreorderDetail, PreorderRequest

OBSERVATION_SEPARATOR = " - "


def milk_surcharge(line: CartLine) -> float:
    if line.milk_type is not None and line.milk_type.has_surcharge:
        return MILK_SURCHARGE * line.quantity
    return 0.0


def extras_surcharge(line: CartLine) -> float:
    return len(line.extras) * EXTRA_PRICE * line.quantity


def compute_totals(lines: Iterable[CartLine]) -> CheckoutTotals:
    """Итог = базовая сумма корзины + доплата за молоко + доплата за экстра."""
    lines = list(lines)
    return CheckoutTotals(
        subtotal=round(sum(line.unit_price * line.quantity for line in lines), 2),
        milk_surcharge=round(sum(milk_surcharge(line) for line in lines), 2),
        extras_surcharge=round(sum(extras_surcharge(line) for line in lines), 2),
    )


def build_observations(line: CartLine) -> Optional[str]:
    """Пожелания к позиции для бариста: приготовление, молоко, экстра, скуп."""
    pieces = []
    if line.preparation is not None:
        pieces.append(f"Preparación: {line.preparation.label}")
    if line.milk_type is not None and line.milk_type.has_surcharge:
        pieces.append(f"Leche: {line.milk_type.label} (+${MILK_SURCHARGE:.0f})")
    if line.extras:
        names = ", ".join(extra_name(extra) for extra in line.extras)
        pieces.append(f"Extras: {names} (+${EXTRA_PRICE:.0f} c/u)")
    if line.protein_type is not None:
        pieces.append(f"Scoop: {line.protein_type.label}")
    return OBSERVATION_SEPARATOR.join(pieces) or None


def compose_preorder(lines: Iterable[CartLine], draft: CheckoutDraft) -> PreorderRequest:
    """Собрать запрос пред-заказа.

    Общий комментарий идёт только в поле comentarios, в observaciones
    каждой позиции остаются лишь её модификаторы.
    """
    lines = list(lines)
    totals = compute_totals(lines)
    return PreorderRequest(
        service_type=draft.service_type,
        customer_name=draft.customer_name,
        comments=draft.comments,
        milk_surcharge=totals.milk_surcharge,
        details=[
            PreorderDetail(
                product_id=line.product_id,
                quantity=line.quantity,
                observations=build_observations(line),
            )
            for line in lines
        ],
    )
