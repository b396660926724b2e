from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from billtrack.db import dispose_engine, initialize_db
from billtrack.errors import BillTrackError
from billtrack.logging import configure_logging, reconfigure
from web.deps import DBConnectionMiddleware
from web.routes.bills import router as bills_router
from web.routes.stats import router as stats_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Alembic's fileConfig may have overridden the logging config
    reconfigure()
    logger.info("Application started")
    yield
    dispose_engine()
    logger.info("Application stopped")


app = FastAPI(title="billtrack", lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)

app.include_router(bills_router)
app.include_router(stats_router)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        {"success": False, "statusCode": status_code, "statusMessage": message},
        status_code=status_code,
    )


@app.exception_handler(BillTrackError)
async def billtrack_error_handler(request: Request, exc: BillTrackError):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.info("HTTP %d on %s %s", exc.status_code, request.method, request.url.path)
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning("Request validation failed on %s %s: %s", request.method, request.url.path, problems)
    return error_response(400, problems or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return error_response(500, "Internal Server Error")


@app.get("/health")
async def health():
    return {"success": True, "status": "ok"}
