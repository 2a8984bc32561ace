from __future__ import annotations

from typing import Sequence

from ..core.enums import MealType
from .model import MenuItem, MenuSlot
from .repository import MenuRepository


class InMemoryMenuRepository(MenuRepository):
    def __init__(self):
        self._slots: dict[tuple[str, MealType], MenuSlot] = {}

    def list_slots(self) -> Sequence[MenuSlot]:
        return list(self._slots.values())

    def save_slot(self, *, day: str, meal_type: MealType, items: Sequence[MenuItem]) -> None:
        self._slots[(day, meal_type)] = MenuSlot(day=day, meal_type=meal_type, items=tuple(items))
