from __future__ import annotations

import logging

from ..core.exceptions import DataMismatchError, StudentNotFoundError
from .model import StudentRecord
from .payload import QRPayload
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class RosterLookup:
    """Resolve a scanned credential to an approved student.

    Two separate checks: the email must belong to an approved student, and
    every identity field printed on the credential must still match the
    roster. The second check catches tampered or stale codes.
    """

    def __init__(self, students: StudentRepository):
        self._students = students

    def lookup(self, payload: QRPayload) -> StudentRecord:
        student = self._students.find_approved_by_email(payload.email.strip().lower())
        if not student:
            logger.info("Scan rejected: no approved student for %s", payload.email)
            raise StudentNotFoundError("Student not found or registration not approved")

        mismatched = [
            field
            for field, roster_value, scanned_value in (
                ("rollNo", student.roll_no, payload.roll_no),
                ("name", student.name, payload.name),
                ("messName", student.mess_name, payload.mess_name),
            )
            if roster_value != scanned_value
        ]
        if mismatched:
            logger.warning("Scan rejected for %s: mismatched %s", payload.email, ", ".join(mismatched))
            raise DataMismatchError("Invalid QR code - data mismatch")

        return student
