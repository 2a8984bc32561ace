from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import FeedbackStatus
from .model import Feedback
from .repository import FeedbackRepository


class InMemoryFeedbackRepository(FeedbackRepository):
    def __init__(self):
        self._by_id: dict[int, Feedback] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(
        self,
        *,
        student_id: str,
        student_name: str,
        category: str,
        message: str,
        created_at: datetime,
    ) -> int:
        with self._lock:
            feedback_id = self._next_id
            self._next_id += 1
            self._by_id[feedback_id] = Feedback(
                feedback_id=feedback_id,
                student_id=student_id,
                student_name=student_name,
                category=category,
                message=message,
                status=FeedbackStatus.PENDING,
                created_at=created_at,
            )
            return feedback_id

    def get(self, feedback_id: int) -> Optional[Feedback]:
        return self._by_id.get(int(feedback_id))

    def list_by_status(self, status: Optional[FeedbackStatus] = None) -> Sequence[Feedback]:
        items = [f for f in self._by_id.values() if status is None or f.status == status]
        items.sort(key=lambda f: (f.created_at, f.feedback_id), reverse=True)
        return items

    def set_status(self, *, feedback_id: int, status: FeedbackStatus) -> bool:
        with self._lock:
            current = self._by_id.get(int(feedback_id))
            if not current:
                return False
            self._by_id[current.feedback_id] = replace(current, status=status)
            return True
