"""Модели оформления пред-заказа."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ServiceType(str, Enum):
    EAT_IN = "comer-aqui"
    TAKEOUT = "para-llevar"

    @property
    def label(self) -> str:
        return "Comer Aquí" if self is ServiceType.EAT_IN else "Para Llevar"


@dataclass
class CheckoutDraft:
    """Данные формы оформления; живут, пока открыто окно заказа."""

    customer_name: Optional[str] = None
    service_type: ServiceType = ServiceType.EAT_IN
    comments: Optional[str] = None

    def __post_init__(self):
        self.service_type = ServiceType(self.service_type)
        self.customer_name = (self.customer_name or "").strip() or None
        self.comments = (self.comments or "").strip() or None


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: float = 0.0
    milk_surcharge: float = 0.0
    extras_surcharge: float = 0.0

    @property
    def total(self) -> float:
        return round(self.subtotal + self.milk_surcharge + self.extras_surcharge, 2)

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "milk_surcharge": self.milk_surcharge,
            "extras_surcharge": self.extras_surcharge,
            "total": self.total,
        }


@dataclass(frozen=True)
class PreorderDetail:
    product_id: str
    quantity: int
    observations: Optional[str] = None

    def to_payload(self) -> dict:
        product_id: object = self.product_id
        # Бэкенд хранит числовые id; строковые отправляем как есть
        if isinstance(product_id, str) and product_id.isdigit():
            product_id = int(product_id)
        return {
            "id_producto": product_id,
            "cantidad": self.quantity,
            "observaciones": self.observations,
        }


@dataclass(frozen=True)
class PreorderRequest:
    """Тело запроса POST /preordenes/crear_preorden."""

    service_type: ServiceType
    details: List[PreorderDetail] = field(default_factory=list)
    customer_name: Optional[str] = None
    comments: Optional[str] = None
    milk_surcharge: float = 0.0

    def to_payload(self) -> dict:
        return {
            "nombre_cliente": self.customer_name,
            "detalles": [detail.to_payload() for detail in self.details],
            "tipo_servicio": self.service_type.value,
            "comentarios": self.comments,
            "extra_leche": self.milk_surcharge,
        }
