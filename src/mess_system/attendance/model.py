from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import MealType, ScanOutcome
from ..students.model import StudentRecord


@dataclass(frozen=True)
class ScanRecord:
    """Domain entity: one attendance event in the append-only ledger."""

    student_id: str
    student_name: str
    meal_type: MealType
    mess_name: str
    timestamp: datetime

    @property
    def scan_date(self) -> date:
        return self.timestamp.date()

    @property
    def key(self) -> tuple[str, MealType, date]:
        return (self.student_id, self.meal_type, self.scan_date)


@dataclass(frozen=True)
class DailyHeadCount:
    """Read-model: per-day meal tally derived from the ledger."""

    scan_date: date
    breakfast: int = 0
    lunch: int = 0
    dinner: int = 0

    @property
    def total(self) -> int:
        return self.breakfast + self.lunch + self.dinner

    def count_for(self, meal_type: MealType) -> int:
        return getattr(self, meal_type.value)

    def incremented(self, meal_type: MealType) -> "DailyHeadCount":
        return replace(self, **{meal_type.value: self.count_for(meal_type) + 1})

    def as_dict(self) -> dict:
        return {
            "date": self.scan_date.strftime("%Y-%m-%d"),
            "breakfast": self.breakfast,
            "lunch": self.lunch,
            "dinner": self.dinner,
            "total": self.total,
        }


@dataclass(frozen=True)
class ScanFilter:
    """Administrative selection of ledger entries (listing, purge)."""

    start: Optional[date] = None
    end: Optional[date] = None
    student_id: Optional[str] = None
    meal_type: Optional[MealType] = None

    @property
    def is_empty(self) -> bool:
        return not (self.start or self.end or self.student_id or self.meal_type)

    def matches(self, record: ScanRecord) -> bool:
        if self.start and record.scan_date < self.start:
            return False
        if self.end and record.scan_date > self.end:
            return False
        if self.student_id and record.student_id != self.student_id:
            return False
        if self.meal_type and record.meal_type != self.meal_type:
            return False
        return True


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan attempt, as handed to the scanner UI."""

    outcome: ScanOutcome
    message: str
    student: Optional[StudentRecord] = None
    meal_type: Optional[MealType] = None
    timestamp: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.outcome == ScanOutcome.RECORDED

    def as_dict(self) -> dict:
        s = self.student
        return {
            "success": self.success,
            "outcome": self.outcome.value,
            "message": self.message,
            "meal_type": self.meal_type.value if self.meal_type else None,
            "timestamp": self.timestamp.isoformat(timespec="seconds") if self.timestamp else None,
            "student": (
                {
                    "name": s.name,
                    "roll_no": s.roll_no,
                    "branch": s.branch,
                    "hostel_name": s.hostel_name,
                    "mess_name": s.mess_name,
                    "room_no": s.room_no,
                    "photo": s.photo,
                }
                if s
                else None
            ),
        }
