from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Iterable

from ..core.exceptions import ValidationError
from .model import DailyHeadCount, ScanFilter, ScanRecord
from .repository import HeadCountRepository, ScanLedgerRepository

logger = logging.getLogger(__name__)


def recompute_head_counts(records: Iterable[ScanRecord]) -> dict[date, DailyHeadCount]:
    """Fold the ledger into per-day meal counts.

    Pure: same records in, same table out. Days without records are absent.
    """

    counts: dict[date, DailyHeadCount] = {}
    for r in records:
        day = r.scan_date
        counts[day] = (counts.get(day) or DailyHeadCount(scan_date=day)).incremented(r.meal_type)
    return counts


class HeadCountAggregator:
    """Keeps the stored head-count view consistent with the ledger.

    Owns the lock AttendanceLedger writes under: a rebuild never
    interleaves with a scan between reading the ledger and writing the view.
    """

    def __init__(self, scans: ScanLedgerRepository, head_counts: HeadCountRepository):
        self._scans = scans
        self._head_counts = head_counts
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def expected(self) -> dict[date, DailyHeadCount]:
        return recompute_head_counts(self._scans.list_matching(ScanFilter()))

    def rebuild(self) -> dict[date, DailyHeadCount]:
        with self._lock:
            counts = self.expected()
            self._head_counts.replace_all(counts.values())
            return counts

    def reconcile(self) -> bool:
        """Rewrite the stored view if it drifted from the ledger.

        Returns True when a repair was needed. Safe to run any number of times.
        """

        with self._lock:
            expected = self.expected()
            stored = {c.scan_date: c for c in self._head_counts.list_range()}
            if stored == expected:
                return False

            drifted = sorted(d for d in set(stored) | set(expected) if stored.get(d) != expected.get(d))
            logger.warning("Head counts drifted from ledger on %d day(s), rebuilding: %s", len(drifted), drifted[:10])
            self._head_counts.replace_all(expected.values())
            return True

    def repair_day(self, day: date) -> DailyHeadCount:
        with self._lock:
            records = self._scans.list_matching(ScanFilter(start=day, end=day))
            count = recompute_head_counts(records).get(day) or DailyHeadCount(scan_date=day)
            if count.total:
                self._head_counts.put(count)
            else:
                self._head_counts.delete(day)
            return count

    def purge(self, scan_filter: ScanFilter) -> int:
        """Delete ledger entries matching an explicit filter and rebuild."""

        if scan_filter.is_empty:
            raise ValidationError("Purge needs at least one filter (date range, student or meal)")

        with self._lock:
            removed = self._scans.delete_matching(scan_filter)
            self.rebuild()
        logger.info("Purged %d scan record(s) matching %s", removed, scan_filter)
        return removed
