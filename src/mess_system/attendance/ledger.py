from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core.enums import MealType, ScanOutcome
from ..core.exceptions import DuplicateKeyError, StorageError
from ..students.model import StudentRecord
from .aggregator import HeadCountAggregator
from .model import ScanRecord
from .repository import HeadCountRepository, ScanLedgerRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Records meal attendance, at most once per student, meal and day.

    The duplicate check, the append and the head-count increment run as one
    critical section under the aggregator's lock, which rebuilds also hold.
    Across processes the store's unique key backs this up: a colliding
    append is reported as DUPLICATE.
    """

    def __init__(
        self,
        scans: ScanLedgerRepository,
        head_counts: HeadCountRepository,
        *,
        aggregator: Optional[HeadCountAggregator] = None,
    ):
        self._scans = scans
        self._head_counts = head_counts
        self._aggregator = aggregator or HeadCountAggregator(scans, head_counts)
        self._lock = self._aggregator.lock

    def record_attendance(self, student: StudentRecord, meal_type: MealType, now: datetime) -> ScanOutcome:
        record = ScanRecord(
            student_id=student.roll_no,
            student_name=student.name,
            meal_type=meal_type,
            mess_name=student.mess_name,
            timestamp=now,
        )
        day = record.scan_date

        with self._lock:
            if self._scans.exists(student_id=record.student_id, meal_type=meal_type, scan_date=day):
                logger.info("Duplicate %s scan for %s on %s", meal_type.value, record.student_id, day)
                return ScanOutcome.DUPLICATE

            try:
                self._scans.append(record)
            except DuplicateKeyError:
                logger.info("Duplicate %s scan for %s on %s (store)", meal_type.value, record.student_id, day)
                return ScanOutcome.DUPLICATE

            try:
                self._head_counts.increment(scan_date=day, meal_type=meal_type)
            except StorageError:
                logger.exception("Head count increment failed for %s; repairing from ledger", day)
                self._repair(day)

        logger.info("Recorded %s for %s (%s) at %s", meal_type.value, record.student_id, record.mess_name, now)
        return ScanOutcome.RECORDED

    def _repair(self, day) -> None:
        # The append already succeeded; the view is fixed by recomputation, never by undoing the scan.
        try:
            self._aggregator.repair_day(day)
        except StorageError:
            logger.exception("Head count repair for %s failed; next reconcile will fix it", day)
