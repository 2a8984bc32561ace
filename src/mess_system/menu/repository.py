from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import MealType
from .model import MenuItem, MenuSlot


class MenuRepository(Protocol):
    def list_slots(self) -> Sequence[MenuSlot]:
        """Stored slots only; unset slots are simply missing."""

        raise NotImplementedError

    def save_slot(self, *, day: str, meal_type: MealType, items: Sequence[MenuItem]) -> None:
        raise NotImplementedError
