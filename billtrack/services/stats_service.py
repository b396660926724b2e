from __future__ import annotations

import logging

from billtrack.models.bill import Bill, BillType
from billtrack.models.stats import YearlyStats
from billtrack.repositories.base import BillRepository, YearlyStatsRepository

logger = logging.getLogger(__name__)


class StatsService:
    """Owns the yearly_stats table: the only writer of its aggregate columns.

    Every update is a full recomputation from the confirmed bills of the year,
    never an increment, so the stored row always equals what the bills say.
    Concurrent recomputes for the same year are not serialized; the last
    writer wins.
    """

    def __init__(self, bill_repo: BillRepository, stats_repo: YearlyStatsRepository) -> None:
        self.bill_repo = bill_repo
        self.stats_repo = stats_repo

    def _get_or_create(self, year: int) -> YearlyStats:
        stats = self.stats_repo.get_by_year(year)
        if stats is None:
            stats = self.stats_repo.create(YearlyStats(year=year))
            logger.info("Yearly stats created for year=%s", year)
        return stats

    def get_stats(self, year: int) -> YearlyStats:
        return self._get_or_create(year)

    def recompute(self, year: int) -> YearlyStats:
        energy_bills = self.bill_repo.list_confirmed_by_type(year, BillType.ENERGY)
        gas_bills = self.bill_repo.list_confirmed_by_type(year, BillType.GAS)

        energy_total_cost = _total_cost(energy_bills)
        gas_total_cost = _total_cost(gas_bills)

        stats = self._get_or_create(year)
        stats.energy_total_cost = energy_total_cost
        stats.energy_total_consumed = _total_consumed(energy_bills)
        stats.energy_bill_count = len(energy_bills)
        stats.gas_total_cost = gas_total_cost
        stats.gas_total_consumed = _total_consumed(gas_bills)
        stats.gas_bill_count = len(gas_bills)
        stats.combined_total_cost = energy_total_cost + gas_total_cost

        result = self.stats_repo.update(stats)
        logger.info(
            "Yearly stats recomputed: year=%s energy=%d gas=%d combined_cost=%.2f",
            year,
            result.energy_bill_count,
            result.gas_bill_count,
            result.combined_total_cost,
        )
        return result


def _total_cost(bills: list[Bill]) -> float:
    return sum((bill.cost for bill in bills), 0.0)


def _total_consumed(bills: list[Bill]) -> float:
    return sum((bill.consumption for bill in bills), 0.0)
