from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from mess_system.attendance.aggregator import HeadCountAggregator, recompute_head_counts
from mess_system.attendance.ledger import AttendanceLedger
from mess_system.attendance.memory_repository import InMemoryHeadCounts, InMemoryScanLedger
from mess_system.attendance.model import DailyHeadCount, ScanFilter, ScanRecord
from mess_system.core.enums import MealType
from mess_system.core.exceptions import ValidationError


def _rec(roll: str, meal: MealType, when: datetime) -> ScanRecord:
    return ScanRecord(student_id=roll, student_name=roll, meal_type=meal, mess_name="veg", timestamp=when)


RECORDS = [
    _rec("A", MealType.BREAKFAST, datetime(2026, 3, 2, 7, 30)),
    _rec("B", MealType.BREAKFAST, datetime(2026, 3, 2, 8, 10)),
    _rec("A", MealType.LUNCH, datetime(2026, 3, 2, 12, 45)),
    _rec("C", MealType.DINNER, datetime(2026, 3, 3, 20, 0)),
]


def test_recompute_counts_per_day():
    counts = recompute_head_counts(RECORDS)

    assert counts[date(2026, 3, 2)] == DailyHeadCount(date(2026, 3, 2), breakfast=2, lunch=1, dinner=0)
    assert counts[date(2026, 3, 2)].total == 3
    assert counts[date(2026, 3, 3)].dinner == 1
    assert date(2026, 3, 4) not in counts
    assert recompute_head_counts([]) == {}


def test_recompute_matches_incremental_counts():
    incremental = InMemoryHeadCounts()
    for r in RECORDS:
        incremental.increment(scan_date=r.scan_date, meal_type=r.meal_type)

    expected = recompute_head_counts(RECORDS)
    assert {c.scan_date: c for c in incremental.list_range()} == expected


def test_rebuild_is_idempotent():
    counts = InMemoryHeadCounts()
    agg = HeadCountAggregator(InMemoryScanLedger(RECORDS), counts)

    first = agg.rebuild()
    second = agg.rebuild()

    assert first == second
    assert list(counts.list_range()) == [first[date(2026, 3, 2)], first[date(2026, 3, 3)]]


def test_reconcile_repairs_drift_only_when_needed():
    counts = InMemoryHeadCounts()
    agg = HeadCountAggregator(InMemoryScanLedger(RECORDS), counts)

    assert agg.reconcile() is True
    assert agg.reconcile() is False

    counts.put(DailyHeadCount(date(2026, 3, 2), breakfast=9))
    counts.put(DailyHeadCount(date(2026, 2, 1), lunch=4))

    assert agg.reconcile() is True
    assert counts.get(date(2026, 3, 2)).breakfast == 2
    assert counts.get(date(2026, 2, 1)) is None


def test_repair_day_recomputes_a_single_day():
    counts = InMemoryHeadCounts()
    agg = HeadCountAggregator(InMemoryScanLedger(RECORDS), counts)
    counts.put(DailyHeadCount(date(2026, 3, 3), dinner=5))

    fixed = agg.repair_day(date(2026, 3, 2))

    assert fixed.total == 3
    assert counts.get(date(2026, 3, 3)).dinner == 5


def test_purge_requires_a_filter():
    agg = HeadCountAggregator(InMemoryScanLedger(RECORDS), InMemoryHeadCounts())

    with pytest.raises(ValidationError):
        agg.purge(ScanFilter())


def test_purge_removes_matching_and_rebuilds():
    scans, counts = InMemoryScanLedger(RECORDS), InMemoryHeadCounts()
    agg = HeadCountAggregator(scans, counts)
    agg.rebuild()

    removed = agg.purge(ScanFilter(student_id="A"))

    assert removed == 2
    assert counts.get(date(2026, 3, 2)) == DailyHeadCount(date(2026, 3, 2), breakfast=1)
    assert counts.get(date(2026, 3, 3)).dinner == 1

    assert agg.purge(ScanFilter(start=date(2026, 3, 3), end=date(2026, 3, 3), meal_type=MealType.DINNER)) == 1
    assert counts.get(date(2026, 3, 3)) is None


class ScanDuringRead(InMemoryScanLedger):
    """Starts `on_read` in another thread right after the next full read."""

    def __init__(self, records=()):
        super().__init__(records)
        self.on_read = None
        self.worker = None

    def list_matching(self, scan_filter):
        rows = super().list_matching(scan_filter)
        if self.on_read:
            hook, self.on_read = self.on_read, None
            self.worker = threading.Thread(target=hook)
            self.worker.start()
            self.worker.join(timeout=0.2)
        return rows


@pytest.mark.parametrize("run", ["rebuild", "reconcile", "purge"])
def test_scan_during_rebuild_is_not_lost(add_student, run):
    s = add_student()
    scans, counts = ScanDuringRead(RECORDS), InMemoryHeadCounts()
    agg = HeadCountAggregator(scans, counts)
    ledger = AttendanceLedger(scans, counts, aggregator=agg)
    counts.put(DailyHeadCount(date(2026, 1, 1), lunch=3))

    scans.on_read = lambda: ledger.record_attendance(s, MealType.DINNER, datetime(2026, 3, 2, 20, 0))
    if run == "purge":
        agg.purge(ScanFilter(end=date(2026, 1, 31)))
    else:
        getattr(agg, run)()
    scans.worker.join()

    stored = {c.scan_date: c for c in counts.list_range()}
    assert stored == recompute_head_counts(scans.list_matching(ScanFilter()))
    assert stored[date(2026, 3, 2)].dinner == 1
