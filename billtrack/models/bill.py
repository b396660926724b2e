from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class BillType(str, Enum):
    ENERGY = "energy"
    GAS = "gas"


class Unit(str, Enum):
    KW = "kW"
    CUBIC_METERS = "m³"


class Bill(BaseModel):
    id: int | None = None
    uuid: str = ""
    bill_type: BillType
    period: str
    cost: float
    consumption: float
    unit: Unit
    year: int
    month: int | None = None  # not range-checked, see billtrack.period
    notes: str | None = None
    confirmed: bool = False
    created_at: datetime | None = None

    @property
    def status(self) -> str:
        return "confirmed" if self.confirmed else "pending"
