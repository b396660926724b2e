from abc import ABC, abstractmethod

from billtrack.models.bill import Bill, BillType
from billtrack.models.stats import YearlyStats


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Bill | None: ...

    @abstractmethod
    def list_pending(self) -> list[Bill]: ...

    @abstractmethod
    def list_confirmed(self, year: int | None = None) -> list[Bill]: ...

    @abstractmethod
    def list_confirmed_by_type(self, year: int, bill_type: BillType) -> list[Bill]: ...

    @abstractmethod
    def mark_confirmed(self, bill_id: int) -> Bill: ...

    @abstractmethod
    def delete(self, bill_id: int) -> None: ...


class YearlyStatsRepository(ABC):
    @abstractmethod
    def get_by_year(self, year: int) -> YearlyStats | None: ...

    @abstractmethod
    def create(self, stats: YearlyStats) -> YearlyStats: ...

    @abstractmethod
    def update(self, stats: YearlyStats) -> YearlyStats: ...
