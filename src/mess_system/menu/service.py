from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from ..common.datetime_utils import now_local
from ..core.constants import DAYS_OF_WEEK
from ..core.enums import MealType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..meals.classifier import MealWindowClassifier
from .model import MenuItem, MenuSlot
from .repository import MenuRepository


class MenuService:
    """Use cases: read and edit the weekly mess menu."""

    def __init__(self, menu: MenuRepository, classifier: MealWindowClassifier):
        self._menu = menu
        self._classifier = classifier

    @staticmethod
    def normalize_day(day: str) -> str:
        d = (day or "").strip().capitalize()
        if d not in DAYS_OF_WEEK:
            raise ValidationError("Day of week is not valid")
        return d

    @staticmethod
    def normalize_meal(meal: str) -> MealType:
        try:
            return MealType((meal or "").strip().lower())
        except ValueError:
            raise ValidationError("Meal type is not valid")

    def get_week(self) -> list[MenuSlot]:
        stored = {(s.day, s.meal_type): s for s in self._menu.list_slots()}
        return [
            stored.get((day, meal)) or MenuSlot(day=day, meal_type=meal)
            for day in DAYS_OF_WEEK
            for meal in MealType
        ]

    def today(self, *, now: datetime | None = None) -> list[dict]:
        day = DAYS_OF_WEEK[(now or now_local()).weekday()]
        out = []
        for slot in self.get_week():
            if slot.day != day:
                continue
            window = self._classifier.window_for(slot.meal_type)
            row = slot.as_dict()
            row["time"] = window.label if window else "Not served"
            out.append(row)
        return out

    def update_slot(
        self,
        *,
        current_role: Role,
        day: str,
        meal_type: str,
        items: Iterable[Mapping],
    ) -> MenuSlot:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        d = self.normalize_day(day)
        meal = self.normalize_meal(meal_type)

        cleaned = []
        for raw in items or []:
            if not isinstance(raw, Mapping):
                raise ValidationError("Menu items must be objects")
            name = str(raw.get("name") or "").strip()
            if not name:
                continue
            cleaned.append(
                MenuItem(
                    name=name,
                    description=str(raw.get("description") or "").strip(),
                    is_veg=bool(raw.get("is_veg", True)),
                )
            )

        self._menu.save_slot(day=d, meal_type=meal, items=cleaned)
        return MenuSlot(day=d, meal_type=meal, items=tuple(cleaned))
