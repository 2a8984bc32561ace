from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from mess_system.core.enums import RegistrationStatus
from mess_system.students.memory_student_repository import InMemoryStudentRepository
from mess_system.students.model import NewStudent


@pytest.fixture
def fixed_now():
    # Monday, inside the default breakfast window
    return datetime(2026, 3, 2, 8, 0, 0)


@pytest.fixture
def students_repo():
    return InMemoryStudentRepository()


@pytest.fixture
def add_student(students_repo, fixed_now):
    """Create a student directly in the repo, approved unless told otherwise."""

    def _add(
        roll_no: str = "21CS1001",
        name: str = "Asha Rao",
        *,
        email: str | None = None,
        mess_name: str = "veg",
        status: RegistrationStatus = RegistrationStatus.APPROVED,
        password: str = "secret123",
    ):
        student_id = students_repo.create_student(
            NewStudent(
                roll_no=roll_no,
                name=name,
                email=email or f"{roll_no.lower()}@nitw.ac.in",
                branch="CSE",
                hostel_name="UMH",
                mess_name=mess_name,
                room_no="A-101",
                phone="9876543210",
                photo="data:image/png;base64,AAAA",
                password_hash=generate_password_hash(password),
                created_at=fixed_now,
            )
        )
        if status != RegistrationStatus.PENDING:
            students_repo.set_status(student_id=student_id, status=status, approved_at=fixed_now)
        return students_repo.get_by_id(student_id)

    return _add
