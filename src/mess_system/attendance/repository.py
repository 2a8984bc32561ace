from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import MealType
from .model import DailyHeadCount, ScanFilter, ScanRecord


class ScanLedgerRepository(Protocol):
    """Append-only attendance log."""

    def exists(self, *, student_id: str, meal_type: MealType, scan_date: date) -> bool:
        raise NotImplementedError

    def append(self, record: ScanRecord) -> None:
        """Store a new record.

        Raises DuplicateKeyError when (student_id, meal_type, scan_date) is
        already present.
        """

        raise NotImplementedError

    def list_matching(self, scan_filter: ScanFilter) -> Sequence[ScanRecord]:
        """Records matching the filter, oldest first."""

        raise NotImplementedError

    def list_for_student(self, student_id: str, limit: int) -> Sequence[ScanRecord]:
        """Most recent records for one student, newest first."""

        raise NotImplementedError

    def delete_matching(self, scan_filter: ScanFilter) -> int:
        """Administrative purge. Returns the number of removed records."""

        raise NotImplementedError


class HeadCountRepository(Protocol):
    """Materialized daily head counts."""

    def get(self, scan_date: date) -> Optional[DailyHeadCount]:
        raise NotImplementedError

    def increment(self, *, scan_date: date, meal_type: MealType) -> None:
        """Add one to the meal counter, creating a zeroed day if absent."""

        raise NotImplementedError

    def put(self, count: DailyHeadCount) -> None:
        raise NotImplementedError

    def delete(self, scan_date: date) -> None:
        raise NotImplementedError

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[DailyHeadCount]:
        """Stored days in range, oldest first."""

        raise NotImplementedError

    def replace_all(self, counts: Iterable[DailyHeadCount]) -> None:
        """Swap the whole view for a freshly recomputed one."""

        raise NotImplementedError
