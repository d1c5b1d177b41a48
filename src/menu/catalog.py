"""Каталог меню: однократная загрузка продуктов с бэкенда."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Dict, List, Optional

from cafe_api import CafeAPIClient, CafeAPIError

from .categories import organize_by_category
from .models import Category, Product
from .normalize import normalize_products

logger = logging.getLogger(__name__)


class MenuCatalog:
    """Кэш нормализованных продуктов поверх клиента бэкенда.

    Каждая загрузка получает свой номер; ответ более старой загрузки,
    пришедший позже новой, отбрасывается. Неудачная загрузка не считается
    загрузкой: следующее обращение к меню повторит запрос.
    """

    def __init__(self, client: CafeAPIClient) -> None:
        self._client = client
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._products: List[Product] = []
        self._loaded = False
        self.loading = False
        self.error: Optional[str] = None

    @property
    def products(self) -> List[Product]:
        self.ensure_loaded()
        return list(self._products)

    def ensure_loaded(self) -> None:
        if not self._loaded:
            self.refresh()

    def refresh(self) -> bool:
        """Загрузить продукты заново. Возвращает False, если загрузка не удалась."""

        with self._lock:
            token = next(self._tokens)
            self._latest_token = token
            self.loading = True
            self.error = None

        try:
            rows = self._client.get_products()
            products = normalize_products(rows, image_base_url=self._client.base_url)
        except CafeAPIError as exc:
            logger.error("Не удалось загрузить меню: %s", exc)
            with self._lock:
                if token == self._latest_token:
                    self._products = []
                    self.error = str(exc)
                    self.loading = False
                    self._loaded = False
            return False

        with self._lock:
            if token != self._latest_token:
                logger.info("Отброшен устаревший ответ меню (загрузка #%s)", token)
                return True
            self._products = products
            self.error = None
            self.loading = False
            self._loaded = True
        return True

    def get(self, product_id: str) -> Optional[Product]:
        product_id = str(product_id)
        return next((p for p in self.products if p.id == product_id), None)

    def by_category(self) -> Dict[Category, List[Product]]:
        return organize_by_category(self.products)
