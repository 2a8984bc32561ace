from __future__ import annotations

from datetime import date

from mess_system.attendance.model import DailyHeadCount
from mess_system.attendance.mysql_attendance_repository import MySQLHeadCountRepository
from mess_system.core.enums import MealType


class FakeCursor:
    def __init__(self, log, rows):
        self._log = log
        self._rows = rows

    def execute(self, sql, params=()):
        self._log.append((" ".join(sql.split()), params))

    def fetchall(self):
        return self._rows

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, log, rows):
        self._log = log
        self._rows = rows
        self.committed = 0

    def cursor(self, dictionary=True):
        return FakeCursor(self._log, self._rows)

    def commit(self):
        self.committed += 1

    def rollback(self):
        pass

    def close(self):
        pass


class FakeFactory:
    def __init__(self, rows=()):
        self.log = []
        self.rows = list(rows)

    def connect(self, *, with_database=True):
        return FakeConnection(self.log, self.rows)


def test_total_is_never_written():
    factory = FakeFactory()
    repo = MySQLHeadCountRepository(factory)

    repo.increment(scan_date=date(2026, 3, 2), meal_type=MealType.LUNCH)
    repo.put(DailyHeadCount(date(2026, 3, 2), breakfast=2, lunch=1))
    repo.replace_all([DailyHeadCount(date(2026, 3, 3), dinner=4)])

    writes = [sql for sql, _ in factory.log if sql.startswith("INSERT")]
    assert len(writes) == 3
    assert all("total" not in sql for sql in writes)
    assert "lunch = lunch + 1" in writes[0]


def test_rows_map_to_head_counts():
    factory = FakeFactory([{"scan_date": date(2026, 3, 2), "breakfast": 2, "lunch": 1, "dinner": 0}])

    (count,) = MySQLHeadCountRepository(factory).list_range(start=date(2026, 3, 1))

    assert count == DailyHeadCount(date(2026, 3, 2), breakfast=2, lunch=1)
    assert count.total == 3
    assert factory.log[0][1] == (date(2026, 3, 1),)
