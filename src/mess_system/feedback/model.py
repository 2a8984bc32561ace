from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import FeedbackStatus


@dataclass(frozen=True)
class Feedback:
    """A student's note to the mess admin; the admin flips it between pending and resolved."""

    feedback_id: int
    student_id: str
    student_name: str
    category: str
    message: str
    status: FeedbackStatus
    created_at: datetime

    def as_dict(self) -> dict:
        return {
            "feedback_id": self.feedback_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "category": self.category,
            "message": self.message,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(timespec="seconds"),
        }
