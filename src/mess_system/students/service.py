from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import (
    require_digits,
    require_email_domain,
    require_min_length,
    require_non_empty,
    require_option,
)
from ..core.constants import (
    BRANCH_OPTIONS,
    DEFAULT_EMAIL_DOMAIN,
    HOSTEL_OPTIONS,
    MESS_OPTIONS,
    MIN_PASSWORD_LENGTH,
    PHONE_DIGITS,
)
from ..core.enums import RegistrationStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DuplicateKeyError, ValidationError
from .model import NewStudent, StudentRecord
from .repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignupForm:
    """Raw signup input as submitted by the registration form."""

    name: str
    email: str
    password: str
    confirm_password: str
    roll_no: str
    branch: str
    hostel_name: str
    mess_name: str
    room_no: str
    phone: str
    photo: Optional[str] = None


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    name: str
    email: str
    role: Role
    student_id: Optional[int] = None


class RegistrationService:
    """Use cases: student signup and admin approval of the roster."""

    def __init__(self, students: StudentRepository, *, email_domain: str = DEFAULT_EMAIL_DOMAIN):
        self._students = students
        self._email_domain = email_domain

    def register(self, form: SignupForm, *, now: datetime | None = None) -> int:
        name = require_non_empty(form.name, "Name")
        email = require_email_domain(form.email, self._email_domain)
        roll_no = require_non_empty(form.roll_no, "Roll number")
        room_no = require_non_empty(form.room_no, "Room number")
        branch = require_option(form.branch, "Branch", BRANCH_OPTIONS)
        hostel = require_option(form.hostel_name, "Hostel", HOSTEL_OPTIONS)
        mess = require_option(form.mess_name, "Mess", MESS_OPTIONS)
        phone = require_digits(form.phone, "phone number", PHONE_DIGITS)
        photo = require_non_empty(form.photo or "", "Photo")

        require_min_length(form.password, "Password", MIN_PASSWORD_LENGTH)
        if form.password != form.confirm_password:
            raise ValidationError("Passwords do not match")

        if self._students.get_by_email(email):
            raise ValidationError("Email already registered")
        if self._students.get_by_roll_no(roll_no):
            raise ValidationError("Roll number already registered")

        try:
            student_id = self._students.create_student(
                NewStudent(
                    roll_no=roll_no,
                    name=name,
                    email=email,
                    branch=branch,
                    hostel_name=hostel,
                    mess_name=mess,
                    room_no=room_no,
                    phone=phone,
                    photo=photo,
                    password_hash=generate_password_hash(form.password),
                    created_at=now or now_local(),
                )
            )
        except DuplicateKeyError:
            # Lost a race with a concurrent signup for the same email/roll.
            raise ValidationError("Email already registered")

        logger.info("Registration %s submitted for %s (%s)", student_id, email, roll_no)
        return student_id

    def approve(self, *, current_role: Role, student_id: int, now: datetime | None = None) -> StudentRecord:
        return self._decide(
            current_role=current_role,
            student_id=student_id,
            status=RegistrationStatus.APPROVED,
            approved_at=now or now_local(),
        )

    def reject(self, *, current_role: Role, student_id: int) -> StudentRecord:
        return self._decide(current_role=current_role, student_id=student_id, status=RegistrationStatus.REJECTED)

    def _decide(
        self,
        *,
        current_role: Role,
        student_id: int,
        status: RegistrationStatus,
        approved_at: Optional[datetime] = None,
    ) -> StudentRecord:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        student = self._students.get_by_id(int(student_id))
        if not student:
            raise ValidationError("Registration does not exist")
        if student.registration_status != RegistrationStatus.PENDING:
            raise ValidationError("Registration has already been processed")

        if not self._students.set_status(student_id=student.student_id, status=status, approved_at=approved_at):
            raise ValidationError("Registration has already been processed")

        logger.info("Registration %s %s", student.student_id, status.value)
        return self._students.get_by_id(student.student_id)

    def list_by_status(self, status: RegistrationStatus) -> Sequence[StudentRecord]:
        return self._students.list_by_status(status)

    def search_roster(
        self,
        *,
        term: str = "",
        branch: str = "",
        hostel: str = "",
    ) -> list[StudentRecord]:
        """Approved students filtered like the admin roster table."""

        term = (term or "").strip().lower()
        out = []
        for s in self._students.list_by_status(RegistrationStatus.APPROVED):
            if term and term not in s.name.lower() and term not in s.roll_no.lower() and term not in s.email.lower():
                continue
            if branch and s.branch != branch:
                continue
            if hostel and s.hostel_name != hostel:
                continue
            out.append(s)
        return out


class AuthService:
    """Use case: log in as the mess admin or as an approved student.

    The admin credential comes from settings and is compared as-is.
    """

    def __init__(self, students: StudentRepository, *, admin_email: str, admin_password: str):
        self._students = students
        self._admin_email = admin_email.strip().lower()
        self._admin_password = admin_password

    def authenticate(self, email: str, password: str, *, role: Role) -> SessionUser:
        email = (email or "").strip().lower()

        if role == Role.ADMIN:
            if email != self._admin_email or password != self._admin_password:
                raise AuthenticationError("Invalid admin email or password")
            return SessionUser(user_id="admin-1", name="Admin", email=email, role=Role.ADMIN)

        student = self._students.get_by_email(email)
        if not student or not check_password_hash(student.password_hash, password or ""):
            raise AuthenticationError("Invalid email or password")
        if student.registration_status == RegistrationStatus.PENDING:
            raise AuthenticationError("Your registration is pending approval from admin.")
        if student.registration_status != RegistrationStatus.APPROVED:
            raise AuthenticationError("Your registration was rejected.")

        return SessionUser(
            user_id=str(student.student_id),
            name=student.name,
            email=student.email,
            role=Role.STUDENT,
            student_id=student.student_id,
        )
