"""Оформление пред-заказа."""

from .composer import build_observations, compose_preorder, compute_totals
from .models import CheckoutDraft, CheckoutTotals, PreorderDetail, PreorderRequest, ServiceType
from .service import CheckoutOutcome, CheckoutService

__all__ = [
    "CheckoutDraft",
    "CheckoutOutcome",
    "CheckoutService",
    "CheckoutTotals",
    "PreorderDetail",
    "PreorderRequest",
    "ServiceType",
    "build_observations",
    "compose_preorder",
    "compute_totals",
]
