from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from billtrack.constants import current_year
from web.deps import get_stats_service
from web.serializers import serialize_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats")


@router.get("")
async def yearly_stats(request: Request, year: int | None = None):
    if year is None:
        year = current_year()
    stats = get_stats_service(request).get_stats(year)
    logger.info("GET /api/stats year=%s", year)
    return {"success": True, "year": year, "stats": serialize_stats(stats)}
