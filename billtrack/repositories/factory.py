from billtrack.repositories.base import BillRepository, YearlyStatsRepository


def get_bill_repository() -> BillRepository:
    from billtrack.db import get_connection
    from billtrack.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())


def get_yearly_stats_repository() -> YearlyStatsRepository:
    from billtrack.db import get_connection
    from billtrack.repositories.sqlalchemy import SQLAlchemyYearlyStatsRepository

    return SQLAlchemyYearlyStatsRepository(get_connection())
