"""Ingest, confirm and delete against a real (in-memory) database."""

import pytest

from billtrack.errors import NotFoundError
from billtrack.repositories.sqlalchemy import SQLAlchemyBillRepository, SQLAlchemyYearlyStatsRepository
from billtrack.services.confirmation_service import ConfirmationService
from billtrack.services.deletion_service import DeletionService
from billtrack.services.ingestion_service import BillIngestionService
from billtrack.services.stats_service import StatsService

ENERGY_A = {"billType": "energy", "period": "2024-03", "cost": 100, "consumption": 50, "unit": "kW"}
GAS_B = {"billType": "gas", "period": "February 2024", "cost": 60, "consumption": 20, "unit": "m³"}


@pytest.fixture()
def services(db_connection):
    bill_repo = SQLAlchemyBillRepository(db_connection)
    stats_repo = SQLAlchemyYearlyStatsRepository(db_connection)
    stats = StatsService(bill_repo, stats_repo)
    return {
        "bill_repo": bill_repo,
        "stats_repo": stats_repo,
        "stats": stats,
        "ingest": BillIngestionService(bill_repo, stats),
        "confirm": ConfirmationService(bill_repo, stats),
        "delete": DeletionService(bill_repo, stats),
    }


def _totals(stats) -> dict:
    return stats.model_dump(exclude={"id", "year"})


class TestBillLifecycle:
    def test_confirming_two_bills(self, services):
        a = services["ingest"].ingest(ENERGY_A)
        b = services["ingest"].ingest(GAS_B)
        services["confirm"].confirm(a.uuid)
        services["confirm"].confirm(b.uuid)

        assert _totals(services["stats"].recompute(2024)) == {
            "energy_total_cost": 100,
            "energy_total_consumed": 50,
            "energy_bill_count": 1,
            "gas_total_cost": 60,
            "gas_total_consumed": 20,
            "gas_bill_count": 1,
            "combined_total_cost": 160,
        }

    def test_pending_bills_are_excluded(self, services):
        services["ingest"].ingest(ENERGY_A)
        assert services["stats"].recompute(2024).energy_bill_count == 0

    def test_recompute_is_idempotent(self, services):
        a = services["ingest"].ingest(ENERGY_A)
        services["confirm"].confirm(a.uuid)

        first = services["stats"].recompute(2024)
        second = services["stats"].recompute(2024)
        assert first == second

    def test_deleting_confirmed_bill_removes_contribution(self, services):
        a = services["ingest"].ingest(ENERGY_A)
        b = services["ingest"].ingest(GAS_B)
        services["confirm"].confirm(a.uuid)
        services["confirm"].confirm(b.uuid)

        services["delete"].delete(a.uuid)

        stats = services["stats_repo"].get_by_year(2024)
        assert stats.energy_bill_count == 0
        assert stats.energy_total_cost == 0
        assert stats.combined_total_cost == 60

    def test_deleting_pending_bill_leaves_stats_untouched(self, services):
        a = services["ingest"].ingest(ENERGY_A)
        services["confirm"].confirm(a.uuid)
        pending = services["ingest"].ingest(GAS_B)
        before = services["stats_repo"].get_by_year(2024)

        services["delete"].delete(pending.uuid)

        assert services["stats_repo"].get_by_year(2024) == before
        assert services["bill_repo"].get_by_uuid(pending.uuid) is None

    def test_deleting_pending_bill_in_untracked_year_creates_no_stats(self, services):
        pending = services["ingest"].ingest({**GAS_B, "period": "2019-05"})
        services["delete"].delete(pending.uuid)
        assert services["stats_repo"].get_by_year(2019) is None

    def test_ingesting_confirmed_bill_updates_stats_immediately(self, services):
        services["ingest"].ingest(GAS_B, confirmed=True)

        stats = services["stats_repo"].get_by_year(2024)
        assert stats.gas_bill_count == 1
        assert stats.gas_total_cost == 60
        assert stats.combined_total_cost == 60

    def test_stats_are_kept_per_year(self, services):
        services["ingest"].ingest(ENERGY_A, confirmed=True)
        services["ingest"].ingest({**ENERGY_A, "period": "2023-11", "cost": 80}, confirmed=True)

        assert services["stats_repo"].get_by_year(2024).energy_total_cost == 100
        assert services["stats_repo"].get_by_year(2023).energy_total_cost == 80

    def test_confirm_twice_keeps_single_count(self, services):
        a = services["ingest"].ingest(ENERGY_A)
        services["confirm"].confirm(a.uuid)
        services["confirm"].confirm(a.uuid)
        assert services["stats_repo"].get_by_year(2024).energy_bill_count == 1

    def test_confirm_unknown_bill(self, services):
        with pytest.raises(NotFoundError):
            services["confirm"].confirm("01ARZ3NDEKTSV4RRFFQ69G5FAV")

    def test_delete_unknown_bill(self, services):
        with pytest.raises(NotFoundError):
            services["delete"].delete("01ARZ3NDEKTSV4RRFFQ69G5FAV")
