from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import ScanFilter
from ..attendance.repository import HeadCountRepository, ScanLedgerRepository
from ..core.constants import DEFAULT_HISTORY_LIMIT

HEAD_COUNT_FIELDS = ["date", "breakfast", "lunch", "dinner", "total"]
SCAN_FIELDS = ["student_id", "student_name", "meal_type", "mess_name", "date", "time"]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class ReportService:
    """Read side for the admin dashboard: head counts and scan history."""

    def __init__(self, scans: ScanLedgerRepository, head_counts: HeadCountRepository):
        self._scans = scans
        self._head_counts = head_counts

    def head_count_report(self, *, start: Optional[date] = None, end: Optional[date] = None) -> ReportData:
        counts = self._head_counts.list_range(start=start, end=end)
        rows = [c.as_dict() for c in sorted(counts, key=lambda c: c.scan_date, reverse=True)]

        summary = {"days": len(rows), "breakfast": 0, "lunch": 0, "dinner": 0, "total": 0}
        for r in rows:
            for key in ("breakfast", "lunch", "dinner", "total"):
                summary[key] += r[key]
        return ReportData(rows=rows, summary=summary)

    def scan_report(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        search: str = "",
    ) -> ReportData:
        term = (search or "").strip()
        lowered = term.lower()

        rows = []
        per_meal: dict[str, int] = {}
        for r in self._scans.list_matching(ScanFilter(start=start, end=end)):
            if term and term not in r.student_id and lowered not in r.student_name.lower():
                continue
            rows.append(
                {
                    "student_id": r.student_id,
                    "student_name": r.student_name,
                    "meal_type": r.meal_type.value,
                    "mess_name": r.mess_name,
                    "date": r.scan_date.strftime("%Y-%m-%d"),
                    "time": r.timestamp.strftime("%H:%M:%S"),
                }
            )
            per_meal[r.meal_type.value] = per_meal.get(r.meal_type.value, 0) + 1

        rows.reverse()
        return ReportData(rows=rows, summary={"records": len(rows), "by_meal": per_meal})

    def student_history(self, roll_no: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        return [
            {
                "meal_type": r.meal_type.value,
                "mess_name": r.mess_name,
                "date": r.scan_date.strftime("%Y-%m-%d"),
                "time": r.timestamp.strftime("%H:%M:%S"),
            }
            for r in self._scans.list_for_student(roll_no, limit)
        ]


def rows_to_csv(rows: Sequence[dict], fieldnames: Sequence[str]) -> bytes:
    """Render report rows as CSV bytes (UTF-8 with BOM so Excel opens it cleanly)."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")
