from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RegistrationStatus


@dataclass(frozen=True)
class StudentRecord:
    """Domain entity: a student's signup and roster entry.

    Note: Plain data object (no DB access code).
    """

    student_id: int
    roll_no: str
    name: str
    email: str
    branch: str
    hostel_name: str
    mess_name: str
    room_no: str
    phone: str
    photo: Optional[str]
    password_hash: str
    registration_status: RegistrationStatus
    created_at: datetime
    approved_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.registration_status == RegistrationStatus.APPROVED

    def public_view(self) -> dict:
        """Fields safe to hand to the UI (no password hash)."""

        return {
            "student_id": self.student_id,
            "roll_no": self.roll_no,
            "name": self.name,
            "email": self.email,
            "branch": self.branch,
            "hostel_name": self.hostel_name,
            "mess_name": self.mess_name,
            "room_no": self.room_no,
            "phone": self.phone,
            "photo": self.photo,
            "registration_status": self.registration_status.value,
            "created_at": self.created_at.isoformat(timespec="seconds"),
            "approved_at": self.approved_at.isoformat(timespec="seconds") if self.approved_at else None,
        }


@dataclass(frozen=True)
class NewStudent:
    """Validated signup data, ready to be stored."""

    roll_no: str
    name: str
    email: str
    branch: str
    hostel_name: str
    mess_name: str
    room_no: str
    phone: str
    photo: Optional[str]
    password_hash: str
    created_at: datetime
