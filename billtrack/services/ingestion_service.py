from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from billtrack.errors import InvalidInputError
from billtrack.models.bill import Bill, BillType, Unit
from billtrack.models.extraction import ExtractionResult
from billtrack.period import extract_year_and_month
from billtrack.repositories.base import BillRepository
from billtrack.services.stats_service import StatsService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("bill_type", "period", "cost", "consumption", "unit")


def _normalize(extracted: ExtractionResult | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(extracted, ExtractionResult):
        return extracted.model_dump()
    fields = dict(extracted)
    if "bill_type" not in fields and "billType" in fields:
        fields["bill_type"] = fields.pop("billType")
    return fields


class BillIngestionService:
    """Turns extracted bill fields into a persisted Bill.

    Values are expected to be well-formed already (the extraction schema
    checks them); only presence is enforced here.
    """

    def __init__(self, bill_repo: BillRepository, stats_service: StatsService) -> None:
        self.bill_repo = bill_repo
        self.stats_service = stats_service

    def ingest(self, extracted: ExtractionResult | Mapping[str, Any], confirmed: bool = False) -> Bill:
        fields = _normalize(extracted)
        missing = [name for name in REQUIRED_FIELDS if fields.get(name) is None]
        if missing:
            logger.warning("Ingest rejected: missing fields %s", missing)
            raise InvalidInputError(f"Missing required bill fields: {', '.join(missing)}")

        try:
            bill_type = BillType(fields["bill_type"])
            unit = Unit(fields["unit"])
        except ValueError as exc:
            logger.warning("Ingest rejected: %s", exc)
            raise InvalidInputError(str(exc)) from exc

        period = str(fields["period"])
        year, month = extract_year_and_month(period)

        bill = self.bill_repo.create(
            Bill(
                bill_type=bill_type,
                period=period,
                cost=fields["cost"],
                consumption=fields["consumption"],
                unit=unit,
                year=year,
                month=month,
                notes=fields.get("notes"),
                confirmed=confirmed,
            )
        )
        logger.info(
            "Bill ingested: uuid=%s type=%s year=%s month=%s confirmed=%s",
            bill.uuid,
            bill.bill_type.value,
            bill.year,
            bill.month,
            bill.confirmed,
        )

        if confirmed:
            self.stats_service.recompute(year)
        return bill
