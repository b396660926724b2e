from __future__ import annotations

import logging

from billtrack.errors import NotFoundError
from billtrack.repositories.base import BillRepository
from billtrack.services.stats_service import StatsService

logger = logging.getLogger(__name__)


class DeletionService:
    def __init__(self, bill_repo: BillRepository, stats_service: StatsService) -> None:
        self.bill_repo = bill_repo
        self.stats_service = stats_service

    def delete(self, bill_uuid: str) -> None:
        bill = self.bill_repo.get_by_uuid(bill_uuid)
        if bill is None or bill.id is None:
            logger.warning("Delete failed: bill %s not found", bill_uuid)
            raise NotFoundError("Bill not found")

        self.bill_repo.delete(bill.id)
        logger.info("Bill %s deleted (confirmed=%s)", bill_uuid, bill.confirmed)

        # Pending bills never contributed to the stats.
        if bill.confirmed:
            self.stats_service.recompute(bill.year)
