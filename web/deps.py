from __future__ import annotations

import logging

from fastapi import Request
from sqlalchemy import Connection
from starlette.types import ASGIApp, Receive, Scope, Send

from billtrack.db import get_engine
from billtrack.extraction.client import BillExtractor, get_bill_extractor as build_bill_extractor
from billtrack.repositories.sqlalchemy import SQLAlchemyBillRepository, SQLAlchemyYearlyStatsRepository
from billtrack.services.bill_service import BillService
from billtrack.services.confirmation_service import ConfirmationService
from billtrack.services.deletion_service import DeletionService
from billtrack.services.ingestion_service import BillIngestionService
from billtrack.services.stats_service import StatsService

logger = logging.getLogger(__name__)


class DBConnectionMiddleware:
    """Pure ASGI middleware: creates a single DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request) -> Connection:
    """Lazy per-request connection, created on first use and closed by the middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_bill_service(request: Request) -> BillService:
    return BillService(SQLAlchemyBillRepository(_get_conn(request)))


def get_stats_service(request: Request) -> StatsService:
    conn = _get_conn(request)
    return StatsService(SQLAlchemyBillRepository(conn), SQLAlchemyYearlyStatsRepository(conn))


def get_ingestion_service(request: Request) -> BillIngestionService:
    conn = _get_conn(request)
    return BillIngestionService(SQLAlchemyBillRepository(conn), get_stats_service(request))


def get_confirmation_service(request: Request) -> ConfirmationService:
    conn = _get_conn(request)
    return ConfirmationService(SQLAlchemyBillRepository(conn), get_stats_service(request))


def get_deletion_service(request: Request) -> DeletionService:
    conn = _get_conn(request)
    return DeletionService(SQLAlchemyBillRepository(conn), get_stats_service(request))


def get_bill_extractor(request: Request) -> BillExtractor:
    """Process-wide extractor, built on first use and kept on ``app.state``."""
    extractor = getattr(request.app.state, "bill_extractor", None)
    if extractor is None:
        extractor = build_bill_extractor()
        request.app.state.bill_extractor = extractor
        logger.info("Bill extractor created (model=%s)", extractor.model)
    return extractor
