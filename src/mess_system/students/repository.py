from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RegistrationStatus
from .model import NewStudent, StudentRecord


class StudentRepository(Protocol):
    """Repository interface for StudentRecord.

    Note (DIP): services depend on this interface, never on a concrete store.
    """

    def get_by_id(self, student_id: int) -> Optional[StudentRecord]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[StudentRecord]:
        raise NotImplementedError

    def get_by_roll_no(self, roll_no: str) -> Optional[StudentRecord]:
        raise NotImplementedError

    def find_approved_by_email(self, email: str) -> Optional[StudentRecord]:
        """Roster read used by scanning: approved records only."""

        raise NotImplementedError

    def create_student(self, student: NewStudent) -> int:
        raise NotImplementedError

    def set_status(
        self,
        *,
        student_id: int,
        status: RegistrationStatus,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        """Move a pending record to approved/rejected.

        Returns False when the record does not exist or is no longer pending.
        """

        raise NotImplementedError

    def list_by_status(self, status: RegistrationStatus) -> Sequence[StudentRecord]:
        raise NotImplementedError
