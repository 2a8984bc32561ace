from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import FEEDBACK_CATEGORIES
from ..core.enums import FeedbackStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..students.repository import StudentRepository
from .model import Feedback
from .repository import FeedbackRepository

logger = logging.getLogger(__name__)


class FeedbackService:
    """Use cases: students send feedback, the admin reviews and resolves it."""

    def __init__(self, feedback: FeedbackRepository, students: StudentRepository):
        self._feedback = feedback
        self._students = students

    def submit(
        self,
        *,
        current_role: Role,
        student_id: int,
        category: str,
        message: str,
        now: datetime | None = None,
    ) -> Feedback:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can submit feedback")

        student = self._students.get_by_id(int(student_id))
        if not student or not student.is_approved:
            raise AuthorizationError("Only approved students can submit feedback")

        category = (category or "").strip()
        if category not in FEEDBACK_CATEGORIES:
            raise ValidationError("Please select a feedback category")
        message = (message or "").strip()
        if not message:
            raise ValidationError("Please enter your feedback message")

        feedback_id = self._feedback.create(
            student_id=student.roll_no,
            student_name=student.name,
            category=category,
            message=message,
            created_at=now or now_local(),
        )
        logger.info("Feedback %s (%s) from %s", feedback_id, category, student.roll_no)
        return self._feedback.get(feedback_id)

    def list_feedback(self, *, current_role: Role, status: Optional[str] = None) -> Sequence[Feedback]:
        """All entries, or one status; "all" and empty mean no filter."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        value = (status or "all").strip().lower()
        if value == "all":
            return self._feedback.list_by_status()
        try:
            return self._feedback.list_by_status(FeedbackStatus(value))
        except ValueError:
            raise ValidationError("Feedback status is not valid")

    def toggle(self, *, current_role: Role, feedback_id: int) -> Feedback:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        current = self._feedback.get(int(feedback_id))
        if not current:
            raise ValidationError("Feedback does not exist")

        status = current.status.toggled()
        self._feedback.set_status(feedback_id=current.feedback_id, status=status)
        logger.info("Feedback %s marked %s", current.feedback_id, status.value)
        return self._feedback.get(current.feedback_id)
