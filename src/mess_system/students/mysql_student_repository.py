from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RegistrationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import NewStudent, StudentRecord
from .repository import StudentRepository

_COLUMNS = """
    student_id, roll_no, name, email, branch, hostel_name, mess_name, room_no,
    phone, photo, password_hash, registration_status, created_at, approved_at
"""


def _to_record(r: dict) -> StudentRecord:
    return StudentRecord(
        student_id=int(r["student_id"]),
        roll_no=r["roll_no"],
        name=r["name"],
        email=r["email"],
        branch=r["branch"],
        hostel_name=r["hostel_name"],
        mess_name=r["mess_name"],
        room_no=r["room_no"],
        phone=r["phone"],
        photo=r.get("photo"),
        password_hash=r["password_hash"],
        registration_status=RegistrationStatus(r["registration_status"]),
        created_at=r["created_at"],
        approved_at=r.get("approved_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[StudentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where}", params)
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_id(self, student_id: int) -> Optional[StudentRecord]:
        return self._get_one("student_id=%s", (int(student_id),))

    def get_by_email(self, email: str) -> Optional[StudentRecord]:
        return self._get_one("email=%s", (email,))

    def get_by_roll_no(self, roll_no: str) -> Optional[StudentRecord]:
        return self._get_one("roll_no=%s", (roll_no,))

    def find_approved_by_email(self, email: str) -> Optional[StudentRecord]:
        return self._get_one(
            "email=%s AND registration_status=%s",
            (email, RegistrationStatus.APPROVED.value),
        )

    def create_student(self, student: NewStudent) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(
                    roll_no, name, email, branch, hostel_name, mess_name, room_no,
                    phone, photo, password_hash, registration_status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    student.roll_no,
                    student.name,
                    student.email,
                    student.branch,
                    student.hostel_name,
                    student.mess_name,
                    student.room_no,
                    student.phone,
                    student.photo,
                    student.password_hash,
                    RegistrationStatus.PENDING.value,
                    student.created_at,
                ),
            )
            return int(cur.lastrowid)

    def set_status(
        self,
        *,
        student_id: int,
        status: RegistrationStatus,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET registration_status=%s, approved_at=%s
                WHERE student_id=%s AND registration_status=%s
                """,
                (status.value, approved_at, int(student_id), RegistrationStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_by_status(self, status: RegistrationStatus) -> Sequence[StudentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE registration_status=%s ORDER BY created_at DESC",
                (status.value,),
            )
            return [_to_record(r) for r in fetchall(cur)]
