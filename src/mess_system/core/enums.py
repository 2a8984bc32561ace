from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Session role used for authorization checks."""

    ADMIN = "admin"
    STUDENT = "student"


class RegistrationStatus(str, Enum):
    """Lifecycle of a student signup."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class MealPeriod(str, Enum):
    """What the meal-window classifier says about a moment in time."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    NOT_MEAL_TIME = "NOT_MEAL_TIME"

    @property
    def meal_type(self) -> Optional[MealType]:
        if self is MealPeriod.NOT_MEAL_TIME:
            return None
        return MealType(self.value.lower())

    @classmethod
    def for_meal(cls, meal_type: MealType) -> "MealPeriod":
        return cls(meal_type.value.upper())


class ScanOutcome(str, Enum):
    """Result of one scan attempt as reported to the scanner UI."""

    RECORDED = "RECORDED"
    DUPLICATE = "DUPLICATE"
    NOT_FOUND = "NOT_FOUND"
    DATA_MISMATCH = "DATA_MISMATCH"
    NOT_MEAL_TIME = "NOT_MEAL_TIME"
    DECODE_FAILURE = "DECODE_FAILURE"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class FeedbackStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"

    def toggled(self) -> "FeedbackStatus":
        return FeedbackStatus.RESOLVED if self is FeedbackStatus.PENDING else FeedbackStatus.PENDING
