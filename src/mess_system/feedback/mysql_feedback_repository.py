from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import FeedbackStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Feedback
from .repository import FeedbackRepository

_COLUMNS = "feedback_id, student_id, student_name, category, message, status, created_at"


def _to_feedback(r: dict) -> Feedback:
    return Feedback(
        feedback_id=int(r["feedback_id"]),
        student_id=r["student_id"],
        student_name=r["student_name"],
        category=r["category"],
        message=r["message"],
        status=FeedbackStatus(r["status"]),
        created_at=r["created_at"],
    )


class MySQLFeedbackRepository(FeedbackRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        student_id: str,
        student_name: str,
        category: str,
        message: str,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO feedback(student_id, student_name, category, message, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (student_id, student_name, category, message, FeedbackStatus.PENDING.value, created_at),
            )
            return int(cur.lastrowid)

    def get(self, feedback_id: int) -> Optional[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM feedback WHERE feedback_id=%s", (int(feedback_id),))
            r = fetchone(cur)
            return _to_feedback(r) if r else None

    def list_by_status(self, status: Optional[FeedbackStatus] = None) -> Sequence[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute(f"SELECT {_COLUMNS} FROM feedback ORDER BY created_at DESC, feedback_id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM feedback WHERE status=%s ORDER BY created_at DESC, feedback_id DESC",
                    (status.value,),
                )
            return [_to_feedback(r) for r in fetchall(cur)]

    def set_status(self, *, feedback_id: int, status: FeedbackStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE feedback SET status=%s WHERE feedback_id=%s",
                (status.value, int(feedback_id)),
            )
            return cur.rowcount > 0
