"""Пакет интеграции с REST-бэкендом кафе."""

from .api_client import (
    CafeAPIClient,
    CafeAPIConnectionError,
    CafeAPIError,
    PreorderResult,
)

__all__ = [
    "CafeAPIClient",
    "CafeAPIConnectionError",
    "CafeAPIError",
    "PreorderResult",
]
