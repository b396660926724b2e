from __future__ import annotations

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from ulid import ULID

from billtrack.constants import now
from billtrack.models.bill import Bill, BillType, Unit
from billtrack.models.stats import YearlyStats
from billtrack.repositories.base import BillRepository, YearlyStatsRepository

_STATS_FIELDS = (
    "energy_total_cost",
    "energy_total_consumed",
    "energy_bill_count",
    "gas_total_cost",
    "gas_total_consumed",
    "gas_bill_count",
    "combined_total_cost",
)


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, bill: Bill) -> Bill:
        result = self.conn.execute(
            text(
                "INSERT INTO bills (uuid, bill_type, period, cost, consumption, unit, "
                "year, month, notes, confirmed, created_at) "
                "VALUES (:uuid, :bill_type, :period, :cost, :consumption, :unit, "
                ":year, :month, :notes, :confirmed, :created_at)"
            ),
            {
                "uuid": str(ULID()),
                "bill_type": bill.bill_type.value,
                "period": bill.period,
                "cost": bill.cost,
                "consumption": bill.consumption,
                "unit": bill.unit.value,
                "year": bill.year,
                "month": bill.month,
                "notes": bill.notes,
                "confirmed": bill.confirmed,
                "created_at": now(),
            },
        )
        bill_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(bill_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve bill after create (id={bill_id})")
        return created

    @staticmethod
    def _row_to_bill(row: RowMapping) -> Bill:
        return Bill(
            id=row["id"],
            uuid=row["uuid"],
            bill_type=BillType(row["bill_type"]),
            period=row["period"],
            cost=row["cost"],
            consumption=row["consumption"],
            unit=Unit(row["unit"]),
            year=row["year"],
            month=row["month"],
            notes=row["notes"],
            confirmed=bool(row["confirmed"]),
            created_at=row["created_at"],
        )

    def _fetch_one(self, sql: str, params: dict) -> Bill | None:
        row = self.conn.execute(text(sql), params).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_bill(row)

    def _fetch_all(self, sql: str, params: dict | None = None) -> list[Bill]:
        rows = self.conn.execute(text(sql), params or {}).mappings().fetchall()
        return [self._row_to_bill(row) for row in rows]

    def get_by_id(self, bill_id: int) -> Bill | None:
        return self._fetch_one("SELECT * FROM bills WHERE id = :id", {"id": bill_id})

    def get_by_uuid(self, uuid: str) -> Bill | None:
        return self._fetch_one("SELECT * FROM bills WHERE uuid = :uuid", {"uuid": uuid})

    def list_pending(self) -> list[Bill]:
        return self._fetch_all(
            "SELECT * FROM bills WHERE confirmed = :confirmed ORDER BY created_at DESC, id DESC",
            {"confirmed": False},
        )

    def list_confirmed(self, year: int | None = None) -> list[Bill]:
        if year is None:
            return self._fetch_all(
                "SELECT * FROM bills WHERE confirmed = :confirmed ORDER BY created_at DESC, id DESC",
                {"confirmed": True},
            )
        return self._fetch_all(
            "SELECT * FROM bills WHERE confirmed = :confirmed AND year = :year "
            "ORDER BY created_at DESC, id DESC",
            {"confirmed": True, "year": year},
        )

    def list_confirmed_by_type(self, year: int, bill_type: BillType) -> list[Bill]:
        return self._fetch_all(
            "SELECT * FROM bills WHERE year = :year AND bill_type = :bill_type "
            "AND confirmed = :confirmed ORDER BY id",
            {"year": year, "bill_type": bill_type.value, "confirmed": True},
        )

    def mark_confirmed(self, bill_id: int) -> Bill:
        self.conn.execute(
            text("UPDATE bills SET confirmed = :confirmed WHERE id = :id"),
            {"confirmed": True, "id": bill_id},
        )
        self.conn.commit()
        updated = self.get_by_id(bill_id)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve bill after confirm (id={bill_id})")
        return updated

    def delete(self, bill_id: int) -> None:
        self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": bill_id})
        self.conn.commit()


class SQLAlchemyYearlyStatsRepository(YearlyStatsRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_stats(row: RowMapping) -> YearlyStats:
        return YearlyStats(
            id=row["id"],
            year=row["year"],
            **{field: row[field] for field in _STATS_FIELDS},
        )

    def get_by_year(self, year: int) -> YearlyStats | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM yearly_stats WHERE year = :year"),
                {"year": year},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_stats(row)

    def create(self, stats: YearlyStats) -> YearlyStats:
        columns = ", ".join(("year", *_STATS_FIELDS))
        placeholders = ", ".join(f":{name}" for name in ("year", *_STATS_FIELDS))
        self.conn.execute(
            text(f"INSERT INTO yearly_stats ({columns}) VALUES ({placeholders})"),
            stats.model_dump(include={"year", *_STATS_FIELDS}),
        )
        self.conn.commit()
        created = self.get_by_year(stats.year)
        if created is None:
            raise RuntimeError(f"Failed to retrieve yearly stats after create (year={stats.year})")
        return created

    def update(self, stats: YearlyStats) -> YearlyStats:
        assignments = ", ".join(f"{name} = :{name}" for name in _STATS_FIELDS)
        self.conn.execute(
            text(f"UPDATE yearly_stats SET {assignments} WHERE year = :year"),
            stats.model_dump(include={"year", *_STATS_FIELDS}),
        )
        self.conn.commit()
        updated = self.get_by_year(stats.year)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve yearly stats after update (year={stats.year})")
        return updated
