from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import FeedbackStatus
from .model import Feedback


class FeedbackRepository(Protocol):
    def create(
        self,
        *,
        student_id: str,
        student_name: str,
        category: str,
        message: str,
        created_at: datetime,
    ) -> int:
        """Store a new entry as pending and return its id."""

        raise NotImplementedError

    def get(self, feedback_id: int) -> Optional[Feedback]:
        raise NotImplementedError

    def list_by_status(self, status: Optional[FeedbackStatus] = None) -> Sequence[Feedback]:
        """Entries newest first, optionally only one status."""

        raise NotImplementedError

    def set_status(self, *, feedback_id: int, status: FeedbackStatus) -> bool:
        raise NotImplementedError
