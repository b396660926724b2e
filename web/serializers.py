from __future__ import annotations

from typing import Any

from billtrack.models.bill import Bill
from billtrack.models.stats import YearlyStats


def serialize_bill_summary(bill: Bill) -> dict[str, Any]:
    return {
        "id": bill.uuid,
        "billType": bill.bill_type.value,
        "period": bill.period,
        "cost": bill.cost,
        "consumption": bill.consumption,
        "unit": bill.unit.value,
        "status": bill.status,
        "notes": bill.notes,
        "year": bill.year,
        "month": bill.month,
        "createdAt": bill.created_at.isoformat() if bill.created_at else None,
    }


def serialize_stats(stats: YearlyStats) -> dict[str, Any]:
    return {
        "energyTotalCost": stats.energy_total_cost,
        "energyTotalConsumed": stats.energy_total_consumed,
        "energyBillCount": stats.energy_bill_count,
        "gasTotalCost": stats.gas_total_cost,
        "gasTotalConsumed": stats.gas_total_consumed,
        "gasBillCount": stats.gas_bill_count,
        "combinedTotalCost": stats.combined_total_cost,
    }
