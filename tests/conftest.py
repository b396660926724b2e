"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

import pytest
from sqlalchemy import Connection, create_engine, text
from sqlalchemy.engine import Engine

from billtrack.models.bill import Bill, BillType, Unit

# Matches Alembic head: 3f1c2a9d8e07 (initial schema)
SCHEMA_DDL = """
CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    bill_type VARCHAR(10) NOT NULL,
    period TEXT NOT NULL,
    cost FLOAT NOT NULL,
    consumption FLOAT NOT NULL,
    unit VARCHAR(10) NOT NULL,
    year INTEGER NOT NULL,
    month INTEGER,
    notes TEXT,
    confirmed BOOLEAN NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
);

CREATE INDEX ix_bills_year_type_confirmed ON bills (year, bill_type, confirmed);

CREATE TABLE yearly_stats (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    year INTEGER NOT NULL UNIQUE,
    energy_total_cost FLOAT NOT NULL DEFAULT 0,
    energy_total_consumed FLOAT NOT NULL DEFAULT 0,
    energy_bill_count INTEGER NOT NULL DEFAULT 0,
    gas_total_cost FLOAT NOT NULL DEFAULT 0,
    gas_total_consumed FLOAT NOT NULL DEFAULT 0,
    gas_bill_count INTEGER NOT NULL DEFAULT 0,
    combined_total_cost FLOAT NOT NULL DEFAULT 0
);
"""


def create_schema(conn: Connection) -> None:
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()


@pytest.fixture()
def db_engine() -> Engine:
    return create_engine("sqlite:///:memory:")


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    create_schema(conn)
    yield conn
    conn.close()


def _sample_bill(**overrides) -> Bill:
    defaults = dict(
        bill_type=BillType.ENERGY,
        period="2024-03",
        cost=100.0,
        consumption=50.0,
        unit=Unit.KW,
        year=2024,
        month=3,
        notes="Confidence: 95.0%",
    )
    defaults.update(overrides)
    return Bill(**defaults)


@pytest.fixture()
def sample_bill():
    return _sample_bill
