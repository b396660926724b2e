from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from billtrack.errors import ExtractionError, InvalidInputError
from billtrack.settings import settings
from billtrack.uploads import validate_upload
from web.deps import (
    get_bill_extractor,
    get_bill_service,
    get_confirmation_service,
    get_deletion_service,
    get_ingestion_service,
)
from web.serializers import serialize_bill_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bills")

MISSING_FIELDS_MESSAGE = (
    "Failed to extract required bill information. Please ensure the file is a clear, "
    "readable image of a utility bill with visible cost and consumption amounts."
)


def _require_id(bill_id: str) -> str:
    bill_id = bill_id.strip()
    if not bill_id:
        raise InvalidInputError("Bill ID is required")
    return bill_id


@router.get("")
async def list_bills(request: Request, status: str = "pending", year: int | None = None):
    bill_service = get_bill_service(request)
    if status == "confirmed":
        bills = bill_service.list_confirmed(year)
    else:
        # Anything other than "confirmed" is treated as "pending".
        bills = bill_service.list_pending()
    logger.info("GET /api/bills status=%s year=%s -> %d bills", status, year, len(bills))
    return {
        "success": True,
        "status": status,
        "bills": [serialize_bill_summary(bill) for bill in bills],
    }


@router.post("/parse")
async def parse_bill(request: Request):
    form = await request.form()
    if not form:
        raise InvalidInputError("No file provided")

    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise InvalidInputError("File field is required")

    filename = upload.filename or "bill"
    data = await upload.read()
    validate_upload(filename, data, settings.max_upload_size)
    logger.info("POST /api/bills/parse file=%s size=%d", filename, len(data))

    extractor = get_bill_extractor(request)
    extracted = await run_in_threadpool(extractor.extract, data, filename)
    if not extracted.period.strip():
        logger.warning("Extraction for %s returned an empty period", filename)
        raise ExtractionError(MISSING_FIELDS_MESSAGE)

    notes = extracted.notes or f"Confidence: {extracted.confidence * 100:.1f}%"
    bill = get_ingestion_service(request).ingest(extracted.model_copy(update={"notes": notes}))

    return {
        "success": True,
        "bill": {
            "id": bill.uuid,
            "billType": bill.bill_type.value,
            "period": bill.period,
            "cost": bill.cost,
            "consumption": bill.consumption,
            "unit": bill.unit.value,
            "confidence": extracted.confidence,
            "notes": bill.notes,
            "confirmed": bill.confirmed,
        },
        "aiParsedData": extracted.model_dump(mode="json", by_alias=True),
    }


@router.post("/{bill_id}/confirm")
async def confirm_bill(request: Request, bill_id: str):
    bill = get_confirmation_service(request).confirm(_require_id(bill_id))
    logger.info("POST /api/bills/%s/confirm -> year=%s", bill_id, bill.year)
    return {
        "success": True,
        "bill": {
            "id": bill.uuid,
            "billType": bill.bill_type.value,
            "period": bill.period,
            "cost": bill.cost,
            "consumption": bill.consumption,
            "unit": bill.unit.value,
            "status": bill.status,
        },
    }


@router.delete("/{bill_id}")
async def delete_bill(request: Request, bill_id: str):
    get_deletion_service(request).delete(_require_id(bill_id))
    logger.info("DELETE /api/bills/%s", bill_id)
    return {"success": True, "message": "Bill deleted successfully"}
