from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RegistrationStatus
from ..core.exceptions import DuplicateKeyError
from .model import NewStudent, StudentRecord
from .repository import StudentRepository


class InMemoryStudentRepository(StudentRepository):
    """Process-local student store (tests, local demos)."""

    def __init__(self):
        self._by_id: dict[int, StudentRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get_by_id(self, student_id: int) -> Optional[StudentRecord]:
        return self._by_id.get(int(student_id))

    def get_by_email(self, email: str) -> Optional[StudentRecord]:
        return next((s for s in self._by_id.values() if s.email == email), None)

    def get_by_roll_no(self, roll_no: str) -> Optional[StudentRecord]:
        return next((s for s in self._by_id.values() if s.roll_no == roll_no), None)

    def find_approved_by_email(self, email: str) -> Optional[StudentRecord]:
        return next(
            (s for s in self._by_id.values() if s.email == email and s.is_approved),
            None,
        )

    def create_student(self, student: NewStudent) -> int:
        with self._lock:
            if self.get_by_email(student.email) or self.get_by_roll_no(student.roll_no):
                raise DuplicateKeyError(f"student {student.email} already exists")

            student_id = self._next_id
            self._next_id += 1
            self._by_id[student_id] = StudentRecord(
                student_id=student_id,
                roll_no=student.roll_no,
                name=student.name,
                email=student.email,
                branch=student.branch,
                hostel_name=student.hostel_name,
                mess_name=student.mess_name,
                room_no=student.room_no,
                phone=student.phone,
                photo=student.photo,
                password_hash=student.password_hash,
                registration_status=RegistrationStatus.PENDING,
                created_at=student.created_at,
            )
            return student_id

    def set_status(
        self,
        *,
        student_id: int,
        status: RegistrationStatus,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        with self._lock:
            current = self._by_id.get(int(student_id))
            if not current or current.registration_status != RegistrationStatus.PENDING:
                return False
            self._by_id[current.student_id] = replace(current, registration_status=status, approved_at=approved_at)
            return True

    def list_by_status(self, status: RegistrationStatus) -> Sequence[StudentRecord]:
        items = [s for s in self._by_id.values() if s.registration_status == status]
        items.sort(key=lambda s: s.created_at, reverse=True)
        return items
