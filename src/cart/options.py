"""Модификаторы позиции и их доплаты."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

MILK_SURCHARGE = 15.0  # за единицу с немолочной/безлактозной основой
EXTRA_PRICE = 20.0  # за каждый экстра-ингредиент на единицу


class Preparation(str, Enum):
    """Способ приготовления холодных напитков."""

    CHILLED = "heladas"
    BLENDED = "frapeadas"

    @property
    def label(self) -> str:
        return "Frío" if self is Preparation.CHILLED else "Frapeada"


class MilkType(str, Enum):
    WHOLE = "entera"
    LACTOSE_FREE = "deslactosada"
    ALMOND = "almendras"

    @property
    def label(self) -> str:
        return {
            MilkType.WHOLE: "Entera",
            MilkType.LACTOSE_FREE: "Deslactosada",
            MilkType.ALMOND: "Almendras",
        }[self]

    @property
    def has_surcharge(self) -> bool:
        return self is not MilkType.WHOLE


class ProteinType(str, Enum):
    PROTEIN = "proteina"
    CREATINE = "creatina"

    @property
    def label(self) -> str:
        return "Proteína" if self is ProteinType.PROTEIN else "Creatina"


@dataclass(frozen=True)
class Extra:
    id: str
    name: str
    price: float = EXTRA_PRICE


EXTRAS: Dict[str, Extra] = {
    extra.id: extra
    for extra in (
        Extra("tocino", "Tocino"),
        Extra("huevo", "Huevo"),
        Extra("jamon", "Jamón"),
        Extra("chorizo", "Chorizo"),
    )
}


def extra_name(extra_id: str) -> str:
    extra = EXTRAS.get(extra_id)
    return extra.name if extra else extra_id
