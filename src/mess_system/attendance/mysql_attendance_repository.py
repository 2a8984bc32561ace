from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import MealType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DailyHeadCount, ScanFilter, ScanRecord
from .repository import HeadCountRepository, ScanLedgerRepository

# Column names are interpolated into SQL; only these are allowed.
_MEAL_COLUMNS = {m: m.value for m in MealType}


def _filter_sql(scan_filter: ScanFilter) -> tuple[str, tuple]:
    clauses: list[str] = []
    params: list[object] = []

    if scan_filter.start is not None:
        clauses.append("scan_date >= %s")
        params.append(scan_filter.start)
    if scan_filter.end is not None:
        clauses.append("scan_date <= %s")
        params.append(scan_filter.end)
    if scan_filter.student_id:
        clauses.append("student_id = %s")
        params.append(scan_filter.student_id)
    if scan_filter.meal_type:
        clauses.append("meal_type = %s")
        params.append(scan_filter.meal_type.value)

    where = " AND ".join(clauses) if clauses else "1=1"
    return where, tuple(params)


def _to_scan(r: dict) -> ScanRecord:
    return ScanRecord(
        student_id=r["student_id"],
        student_name=r["student_name"],
        meal_type=MealType(r["meal_type"]),
        mess_name=r["mess_name"],
        timestamp=r["scanned_at"],
    )


def _to_count(r: dict) -> DailyHeadCount:
    return DailyHeadCount(
        scan_date=r["scan_date"],
        breakfast=int(r["breakfast"]),
        lunch=int(r["lunch"]),
        dinner=int(r["dinner"]),
    )


class MySQLScanLedgerRepository(ScanLedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, *, student_id: str, meal_type: MealType, scan_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM scan_records
                WHERE student_id=%s AND meal_type=%s AND scan_date=%s
                """,
                (student_id, meal_type.value, scan_date),
            )
            return fetchone(cur) is not None

    def append(self, record: ScanRecord) -> None:
        # uq_scan_student_meal_day turns a concurrent second insert into DuplicateKeyError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO scan_records(student_id, student_name, meal_type, mess_name, scanned_at, scan_date)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.student_id,
                    record.student_name,
                    record.meal_type.value,
                    record.mess_name,
                    record.timestamp,
                    record.scan_date,
                ),
            )

    def list_matching(self, scan_filter: ScanFilter) -> Sequence[ScanRecord]:
        where, params = _filter_sql(scan_filter)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id, student_name, meal_type, mess_name, scanned_at
                FROM scan_records
                WHERE {where}
                ORDER BY scanned_at ASC, scan_id ASC
                """,
                params,
            )
            return [_to_scan(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: str, limit: int) -> Sequence[ScanRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, student_name, meal_type, mess_name, scanned_at
                FROM scan_records
                WHERE student_id=%s
                ORDER BY scanned_at DESC
                LIMIT %s
                """,
                (student_id, int(limit)),
            )
            return [_to_scan(r) for r in fetchall(cur)]

    def delete_matching(self, scan_filter: ScanFilter) -> int:
        where, params = _filter_sql(scan_filter)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM scan_records WHERE {where}", params)
            return int(cur.rowcount)


class MySQLHeadCountRepository(HeadCountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, scan_date: date) -> Optional[DailyHeadCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT scan_date, breakfast, lunch, dinner FROM daily_head_counts WHERE scan_date=%s",
                (scan_date,),
            )
            r = fetchone(cur)
            return _to_count(r) if r else None

    def increment(self, *, scan_date: date, meal_type: MealType) -> None:
        col = _MEAL_COLUMNS[meal_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO daily_head_counts(scan_date, {col})
                VALUES(%s, 1)
                ON DUPLICATE KEY UPDATE {col} = {col} + 1
                """,
                (scan_date,),
            )

    def put(self, count: DailyHeadCount) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            self._upsert(cur, count)

    def delete(self, scan_date: date) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM daily_head_counts WHERE scan_date=%s", (scan_date,))

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[DailyHeadCount]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("scan_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("scan_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT scan_date, breakfast, lunch, dinner
                FROM daily_head_counts
                WHERE {" AND ".join(clauses)}
                ORDER BY scan_date ASC
                """,
                tuple(params),
            )
            return [_to_count(r) for r in fetchall(cur)]

    def replace_all(self, counts: Iterable[DailyHeadCount]) -> None:
        # One transaction: readers never see a half-rebuilt view.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM daily_head_counts")
            for count in counts:
                self._upsert(cur, count)

    @staticmethod
    def _upsert(cur, count: DailyHeadCount) -> None:
        cur.execute(
            """
            INSERT INTO daily_head_counts(scan_date, breakfast, lunch, dinner)
            VALUES(%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                breakfast=VALUES(breakfast), lunch=VALUES(lunch), dinner=VALUES(dinner)
            """,
            (count.scan_date, count.breakfast, count.lunch, count.dinner),
        )
