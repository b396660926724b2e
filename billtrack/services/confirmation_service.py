from __future__ import annotations

import logging

from billtrack.errors import NotFoundError
from billtrack.models.bill import Bill
from billtrack.repositories.base import BillRepository
from billtrack.services.stats_service import StatsService

logger = logging.getLogger(__name__)


class ConfirmationService:
    def __init__(self, bill_repo: BillRepository, stats_service: StatsService) -> None:
        self.bill_repo = bill_repo
        self.stats_service = stats_service

    def confirm(self, bill_uuid: str) -> Bill:
        """Mark a bill as confirmed and refresh its year's stats.

        Confirming an already-confirmed bill succeeds and still recomputes.
        """
        bill = self.bill_repo.get_by_uuid(bill_uuid)
        if bill is None or bill.id is None:
            logger.warning("Confirm failed: bill %s not found", bill_uuid)
            raise NotFoundError("Bill not found")

        updated = self.bill_repo.mark_confirmed(bill.id)
        logger.info("Bill %s confirmed (year=%s, was_confirmed=%s)", bill_uuid, bill.year, bill.confirmed)
        self.stats_service.recompute(bill.year)
        return updated
