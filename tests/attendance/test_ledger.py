from __future__ import annotations

import threading
from datetime import datetime

from mess_system.attendance.aggregator import recompute_head_counts
from mess_system.attendance.ledger import AttendanceLedger
from mess_system.attendance.memory_repository import InMemoryHeadCounts, InMemoryScanLedger
from mess_system.attendance.model import ScanFilter
from mess_system.core.enums import MealType, ScanOutcome
from mess_system.core.exceptions import StorageError


class FlakyHeadCounts(InMemoryHeadCounts):
    """Increment always fails; full-row writes still work."""

    def increment(self, *, scan_date, meal_type):
        raise StorageError("connection lost")


class RacingLedger(InMemoryScanLedger):
    """exists() never sees the row, so only the unique key can catch the duplicate."""

    def exists(self, *, student_id, meal_type, scan_date) -> bool:
        return False


def test_records_once_per_meal_and_day(add_student, fixed_now):
    s = add_student()
    scans, counts = InMemoryScanLedger(), InMemoryHeadCounts()
    ledger = AttendanceLedger(scans, counts)

    assert ledger.record_attendance(s, MealType.BREAKFAST, fixed_now) == ScanOutcome.RECORDED
    assert ledger.record_attendance(s, MealType.BREAKFAST, fixed_now.replace(hour=9)) == ScanOutcome.DUPLICATE
    assert ledger.record_attendance(s, MealType.LUNCH, fixed_now.replace(hour=13)) == ScanOutcome.RECORDED
    assert ledger.record_attendance(s, MealType.BREAKFAST, datetime(2026, 3, 3, 8, 0)) == ScanOutcome.RECORDED

    assert len(scans.list_matching(ScanFilter())) == 3
    day = counts.get(fixed_now.date())
    assert (day.breakfast, day.lunch, day.dinner, day.total) == (1, 1, 0, 2)


def test_record_uses_roll_number_and_mess(add_student, fixed_now):
    s = add_student(roll_no="21ME3003", mess_name="special")
    scans = InMemoryScanLedger()

    AttendanceLedger(scans, InMemoryHeadCounts()).record_attendance(s, MealType.BREAKFAST, fixed_now)

    (rec,) = scans.list_matching(ScanFilter())
    assert rec.student_id == "21ME3003"
    assert rec.mess_name == "special"
    assert rec.timestamp == fixed_now


def test_concurrent_scans_record_exactly_once(add_student, fixed_now):
    s = add_student()
    scans, counts = InMemoryScanLedger(), InMemoryHeadCounts()
    ledger = AttendanceLedger(scans, counts)

    outcomes = []
    barrier = threading.Barrier(8)

    def scan():
        barrier.wait()
        outcomes.append(ledger.record_attendance(s, MealType.BREAKFAST, fixed_now))

    threads = [threading.Thread(target=scan) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(ScanOutcome.RECORDED) == 1
    assert outcomes.count(ScanOutcome.DUPLICATE) == 7
    assert counts.get(fixed_now.date()).breakfast == 1


def test_store_unique_key_reports_duplicate(add_student, fixed_now):
    s = add_student()
    counts = InMemoryHeadCounts()
    ledger = AttendanceLedger(RacingLedger(), counts)

    assert ledger.record_attendance(s, MealType.DINNER, fixed_now) == ScanOutcome.RECORDED
    assert ledger.record_attendance(s, MealType.DINNER, fixed_now) == ScanOutcome.DUPLICATE
    assert counts.get(fixed_now.date()).dinner == 1


def test_failed_increment_is_repaired_from_ledger(add_student, fixed_now):
    a = add_student(roll_no="21CS1001")
    b = add_student(roll_no="21CS1002")
    counts = FlakyHeadCounts()
    ledger = AttendanceLedger(InMemoryScanLedger(), counts)

    assert ledger.record_attendance(a, MealType.LUNCH, fixed_now) == ScanOutcome.RECORDED
    assert ledger.record_attendance(b, MealType.LUNCH, fixed_now) == ScanOutcome.RECORDED

    assert counts.get(fixed_now.date()).lunch == 2


class SometimesFlakyHeadCounts(InMemoryHeadCounts):
    """Every third increment fails."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def increment(self, *, scan_date, meal_type):
        self.calls += 1
        if self.calls % 3 == 0:
            raise StorageError("timeout")
        super().increment(scan_date=scan_date, meal_type=meal_type)


def test_ledger_counts_equal_recomputed_counts(add_student):
    students = [add_student(roll_no=f"21CS10{i:02d}", name=f"S{i}") for i in range(4)]
    scans, counts = InMemoryScanLedger(), SometimesFlakyHeadCounts()
    ledger = AttendanceLedger(scans, counts)

    outcomes = []
    for day in (2, 3, 4):
        for meal, hour in ((MealType.BREAKFAST, 8), (MealType.LUNCH, 13), (MealType.DINNER, 20)):
            for i, s in enumerate(students):
                if (i + day + hour) % 3 == 0:
                    continue
                now = datetime(2026, 3, day, hour, 0)
                outcomes.append(ledger.record_attendance(s, meal, now))
                outcomes.append(ledger.record_attendance(s, meal, now.replace(minute=30)))

    assert ScanOutcome.DUPLICATE in outcomes
    assert outcomes.count(ScanOutcome.RECORDED) == len(scans.list_matching(ScanFilter()))
    assert counts.calls >= 3
    assert {c.scan_date: c for c in counts.list_range()} == recompute_head_counts(scans.list_matching(ScanFilter()))
