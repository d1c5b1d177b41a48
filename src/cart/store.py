"""Хранилище корзины одной сессии."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from cafe_api import CafeAPIError
from menu import Product

from .models import CartLine, line_key
from .options import EXTRAS, MilkType, Preparation, ProteinType

logger = logging.getLogger(__name__)

DEFAULT_SIZE = "M"
DEFAULT_IDLE_TTL = 6 * 60 * 60  # секунд без обращений до удаления корзины

ProductValidator = Callable[[Any], bool]


class CartError(Exception):
    """Позицию нельзя добавить в корзину."""


class ProductUnavailableError(CartError):
    def __init__(self, message: str = "El producto no está disponible en este momento") -> None:
        super().__init__(message)


class PriceRequiredError(CartError):
    def __init__(self, product_name: str) -> None:
        super().__init__(
            f"«{product_name}» no tiene precio en línea. Consulta el precio en barra."
        )


class ModifierRequiredError(CartError):
    """Не выбран обязательный модификатор или выбран недопустимый."""


class SizeUnavailableError(CartError):
    def __init__(self, product_name: str, size: str) -> None:
        super().__init__(f"«{product_name}» no se vende en tamaño {size}")


def _coerce(enum_cls, value, what: str):
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ModifierRequiredError(f"Opción de {what} no válida: {value}") from exc


class CartStore:
    """Корзина текущей сессии.

    Мутации выполняются под блокировкой и всегда вычисляются из актуального
    списка позиций, поэтому частые клики не теряют обновлений.
    """

    def __init__(self, validator: Optional[ProductValidator] = None) -> None:
        self._validator = validator
        self._lock = threading.Lock()
        self._lines: list[CartLine] = []
        self.error: Optional[str] = None

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        with self._lock:
            return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return not self._lines

    def get(self, line_id: str) -> Optional[CartLine]:
        with self._lock:
            return next((line for line in self._lines if line.line_id == line_id), None)

    def add(
        self,
        product: Product,
        selected_size: Optional[str] = None,
        quantity: int = 1,
        preparation: Optional[Preparation | str] = None,
        milk_type: Optional[MilkType | str] = None,
        extras: Optional[Iterable[str]] = None,
        protein_type: Optional[ProteinType | str] = None,
    ) -> CartLine:
        """Добавить продукт; та же конфигурация увеличивает количество.

        Raises:
            CartError: продукт без id, количество < 1
            PriceRequiredError: цена не задана (0 / битая)
            ModifierRequiredError: не выбран обязательный модификатор
            ProductUnavailableError: бэкенд сообщил, что продукта нет
        """
        self.error = None
        try:
            candidate = self._build_line(
                product, selected_size, quantity, preparation, milk_type, extras, protein_type
            )
            self._check_available(product)
        except CartError as exc:
            self.error = str(exc)
            raise

        with self._lock:
            for index, line in enumerate(self._lines):
                if line.line_id == candidate.line_id:
                    merged = replace(line, quantity=line.quantity + candidate.quantity)
                    self._lines[index] = merged
                    return merged
            self._lines.append(candidate)
            return candidate

    def _build_line(
        self,
        product: Product,
        selected_size: Optional[str],
        quantity: int,
        preparation,
        milk_type,
        extras,
        protein_type,
    ) -> CartLine:
        if product is None or not getattr(product, "id", None):
            raise CartError("Producto sin identificador")
        if int(quantity) < 1:
            raise CartError("La cantidad debe ser al menos 1")

        size, unit_price = resolve_price(product, selected_size)
        if unit_price <= 0:
            raise PriceRequiredError(product.name)

        caps = product.capabilities
        preparation = _coerce(Preparation, preparation, "preparación")
        milk = _coerce(MilkType, milk_type, "leche")
        protein = _coerce(ProteinType, protein_type, "scoop")
        extra_ids = tuple(sorted(set(extras or ())))

        if caps.requires_milk_choice and milk is None:
            raise ModifierRequiredError("Elige el tipo de leche")
        if milk is not None and not caps.requires_milk_choice:
            raise ModifierRequiredError(f"«{product.name}» no lleva leche")
        if caps.requires_protein_choice and protein is None:
            raise ModifierRequiredError("Elige proteína o creatina")
        if protein is not None and not caps.requires_protein_choice:
            raise ModifierRequiredError(f"«{product.name}» no lleva scoop")
        if extra_ids and not caps.requires_extras_choice:
            raise ModifierRequiredError(f"«{product.name}» no admite extras")
        unknown = [extra for extra in extra_ids if extra not in EXTRAS]
        if unknown:
            raise ModifierRequiredError(f"Extras no válidos: {', '.join(unknown)}")

        return CartLine(
            line_id=line_key(product.id, size, preparation, milk, extra_ids, protein),
            product_id=product.id,
            name=product.name,
            description=product.description,
            unit_price=unit_price,
            size=size,
            quantity=int(quantity),
            preparation=preparation,
            milk_type=milk,
            extras=extra_ids,
            protein_type=protein,
            category=product.category,
            requires_milk=caps.requires_milk_choice,
            requires_extras=caps.requires_extras_choice,
            product=product,
        )

    def _check_available(self, product: Product) -> None:
        if self._validator is None:
            return
        try:
            available = self._validator(product.id)
        except CafeAPIError as exc:
            # Проверка недоступна, не блокируем покупателя
            logger.warning("Проверка продукта %s не удалась, добавляем без проверки: %s", product.id, exc)
            return
        if not available:
            raise ProductUnavailableError()

    def remove(self, line_id: str) -> None:
        with self._lock:
            self._lines = [line for line in self._lines if line.line_id != line_id]

    def set_quantity(self, line_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(line_id)
            return
        with self._lock:
            self._lines = [
                replace(line, quantity=int(quantity)) if line.line_id == line_id else line
                for line in self._lines
            ]

    def remove_lines(self, submitted: Iterable[CartLine]) -> None:
        """Списать отправленные позиции; добавленное после снимка остаётся."""
        ordered: Dict[str, int] = {}
        for line in submitted:
            ordered[line.line_id] = ordered.get(line.line_id, 0) + line.quantity
        with self._lock:
            remaining = []
            for line in self._lines:
                left = line.quantity - ordered.get(line.line_id, 0)
                if left > 0:
                    remaining.append(replace(line, quantity=left) if left != line.quantity else line)
            self._lines = remaining
        self.error = None

    def clear(self) -> None:
        with self._lock:
            self._lines = []
        self.error = None

    def total(self) -> float:
        """Сумма по базовым ценам, без доплат за модификаторы."""
        with self._lock:
            return round(sum(line.unit_price * line.quantity for line in self._lines), 2)

    def item_count(self) -> int:
        with self._lock:
            return sum(line.quantity for line in self._lines)

    def to_dict(self) -> dict:
        return {
            "items": [line.to_dict() for line in self.lines],
            "total": self.total(),
            "item_count": self.item_count(),
            "error": self.error,
        }


def resolve_price(product: Product, selected_size: Optional[str]) -> Tuple[str, float]:
    """Размер и цена за единицу для выбранного размера.

    Raises:
        SizeUnavailableError: у продукта нет такого размера
    """
    primary = product.size or DEFAULT_SIZE
    size = selected_size or primary
    if size not in (primary, product.size2):
        raise SizeUnavailableError(product.name, size)
    if product.size2 and product.price2 and size == product.size2:
        return size, product.price2
    return size, product.price


class CartRegistry:
    """Корзины по идентификатору сессии.

    Корзина заводится при первом изменении; чтение неизвестной сессии даёт
    пустую корзину, не попадающую в реестр. Корзина, к которой не
    обращались дольше ``idle_ttl`` секунд, удаляется.
    """

    def __init__(
        self,
        validator: Optional[ProductValidator] = None,
        idle_ttl: float = DEFAULT_IDLE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._validator = validator
        self._idle_ttl = idle_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._stores: Dict[str, CartStore] = {}
        self._seen: Dict[str, float] = {}

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    def get(self, session_id: str) -> CartStore:
        """Корзина сессии; создаётся, если её ещё нет."""
        with self._lock:
            now = self._clock()
            self._expire(now)
            store = self._stores.get(session_id)
            if store is None:
                store = CartStore(validator=self._validator)
                self._stores[session_id] = store
            self._seen[session_id] = now
            return store

    def peek(self, session_id: Optional[str]) -> CartStore:
        """Корзина сессии только для чтения; реестр не растёт."""
        with self._lock:
            now = self._clock()
            self._expire(now)
            store = self._stores.get(session_id) if session_id else None
            if store is None:
                return CartStore(validator=self._validator)
            self._seen[session_id] = now
            return store

    def _expire(self, now: float) -> None:
        stale = [sid for sid, seen in self._seen.items() if now - seen > self._idle_ttl]
        for session_id in stale:
            del self._stores[session_id]
            del self._seen[session_id]
        if stale:
            logger.info("Удалено неактивных корзин: %s", len(stale))

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)
