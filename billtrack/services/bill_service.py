from __future__ import annotations

import logging

from billtrack.errors import NotFoundError
from billtrack.models.bill import Bill
from billtrack.repositories.base import BillRepository

logger = logging.getLogger(__name__)


class BillService:
    def __init__(self, repo: BillRepository) -> None:
        self.repo = repo

    def list_pending(self) -> list[Bill]:
        result = self.repo.list_pending()
        logger.debug("Listed %d pending bills", len(result))
        return result

    def list_confirmed(self, year: int | None = None) -> list[Bill]:
        result = self.repo.list_confirmed(year)
        logger.debug("Listed %d confirmed bills (year=%s)", len(result), year)
        return result

    def get_bill(self, uuid: str) -> Bill:
        bill = self.repo.get_by_uuid(uuid)
        if bill is None:
            logger.warning("Bill not found: uuid=%s", uuid)
            raise NotFoundError("Bill not found")
        return bill
