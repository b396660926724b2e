import pytest
from sqlalchemy import Connection

from billtrack.repositories.sqlalchemy import SQLAlchemyBillRepository, SQLAlchemyYearlyStatsRepository


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def stats_repo(db_connection: Connection) -> SQLAlchemyYearlyStatsRepository:
    return SQLAlchemyYearlyStatsRepository(db_connection)
