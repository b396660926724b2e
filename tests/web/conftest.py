"""Web test fixtures: TestClient with shared in-memory SQLite and a fake extractor."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from billtrack.models.bill import Bill, BillType, Unit
from billtrack.models.extraction import ExtractionResult
from billtrack.repositories.sqlalchemy import SQLAlchemyBillRepository, SQLAlchemyYearlyStatsRepository
from tests.conftest import create_schema

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


def _make_test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.connect() as conn:
        create_schema(conn)
    return engine


class FakeExtractor:
    """Stands in for BillExtractor; returns ``result`` or raises ``error``."""

    model = "fake-model"

    def __init__(self) -> None:
        self.result = ExtractionResult(
            bill_type=BillType.ENERGY,
            period="March 2024",
            cost=120.5,
            consumption=310.0,
            unit=Unit.KW,
            confidence=0.934,
        )
        self.error: Exception | None = None
        self.calls: list[tuple[int, str]] = []

    def extract(self, data: bytes, filename: str) -> ExtractionResult:
        self.calls.append((len(data), filename))
        if self.error is not None:
            raise self.error
        return self.result


def create_bill_in_db(engine, **overrides) -> Bill:
    """Insert a bill directly, bypassing ingestion."""
    defaults = dict(
        bill_type=BillType.ENERGY,
        period="2024-03",
        cost=100.0,
        consumption=50.0,
        unit=Unit.KW,
        year=2024,
        month=3,
    )
    defaults.update(overrides)
    with engine.connect() as conn:
        return SQLAlchemyBillRepository(conn).create(Bill(**defaults))


def get_stats_row(engine, year: int):
    with engine.connect() as conn:
        return SQLAlchemyYearlyStatsRepository(conn).get_by_year(year)


def count_bills(engine) -> int:
    with engine.connect() as conn:
        return conn.execute(text("SELECT COUNT(*) FROM bills")).scalar_one()


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    return web_test_db


@pytest.fixture()
def fake_extractor(monkeypatch):
    from web.app import app

    extractor = FakeExtractor()
    monkeypatch.setattr(app.state, "bill_extractor", extractor, raising=False)
    return extractor


@pytest.fixture()
def client(fake_extractor):
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)
