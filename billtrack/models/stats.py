from __future__ import annotations

from pydantic import BaseModel


class YearlyStats(BaseModel):
    id: int | None = None
    year: int
    energy_total_cost: float = 0.0
    energy_total_consumed: float = 0.0
    energy_bill_count: int = 0
    gas_total_cost: float = 0.0
    gas_total_consumed: float = 0.0
    gas_bill_count: int = 0
    combined_total_cost: float = 0.0
