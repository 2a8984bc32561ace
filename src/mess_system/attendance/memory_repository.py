from __future__ import annotations

import threading
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import MealType
from ..core.exceptions import DuplicateKeyError
from .model import DailyHeadCount, ScanFilter, ScanRecord
from .repository import HeadCountRepository, ScanLedgerRepository


class InMemoryScanLedger(ScanLedgerRepository):
    """Process-local ledger enforcing the same unique key as scan_records."""

    def __init__(self, records: Iterable[ScanRecord] = ()):
        self._records: list[ScanRecord] = []
        self._keys: set[tuple[str, MealType, date]] = set()
        self._lock = threading.Lock()
        for r in records:
            self.append(r)

    def exists(self, *, student_id: str, meal_type: MealType, scan_date: date) -> bool:
        return (student_id, meal_type, scan_date) in self._keys

    def append(self, record: ScanRecord) -> None:
        with self._lock:
            if record.key in self._keys:
                raise DuplicateKeyError(f"scan already recorded: {record.key}")
            self._keys.add(record.key)
            self._records.append(record)

    def list_matching(self, scan_filter: ScanFilter) -> Sequence[ScanRecord]:
        return [r for r in self._records if scan_filter.matches(r)]

    def list_for_student(self, student_id: str, limit: int) -> Sequence[ScanRecord]:
        items = [r for r in self._records if r.student_id == student_id]
        items.sort(key=lambda r: r.timestamp, reverse=True)
        return items[: int(limit)]

    def delete_matching(self, scan_filter: ScanFilter) -> int:
        with self._lock:
            kept = [r for r in self._records if not scan_filter.matches(r)]
            removed = len(self._records) - len(kept)
            self._records = kept
            self._keys = {r.key for r in kept}
            return removed


class InMemoryHeadCounts(HeadCountRepository):
    def __init__(self):
        self._by_date: dict[date, DailyHeadCount] = {}
        self._lock = threading.Lock()

    def get(self, scan_date: date) -> Optional[DailyHeadCount]:
        return self._by_date.get(scan_date)

    def increment(self, *, scan_date: date, meal_type: MealType) -> None:
        with self._lock:
            current = self._by_date.get(scan_date) or DailyHeadCount(scan_date=scan_date)
            self._by_date[scan_date] = current.incremented(meal_type)

    def put(self, count: DailyHeadCount) -> None:
        with self._lock:
            self._by_date[count.scan_date] = count

    def delete(self, scan_date: date) -> None:
        with self._lock:
            self._by_date.pop(scan_date, None)

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[DailyHeadCount]:
        return [
            c
            for d, c in sorted(self._by_date.items())
            if (start is None or d >= start) and (end is None or d <= end)
        ]

    def replace_all(self, counts: Iterable[DailyHeadCount]) -> None:
        fresh = {c.scan_date: c for c in counts}
        with self._lock:
            self._by_date = fresh
