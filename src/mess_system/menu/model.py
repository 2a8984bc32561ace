from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import MealType


@dataclass(frozen=True)
class MenuItem:
    name: str
    description: str = ""
    is_veg: bool = True

    def as_dict(self) -> dict:
        return {"name": self.name, "description": self.description, "is_veg": self.is_veg}


@dataclass(frozen=True)
class MenuSlot:
    """Dishes served for one meal on one day of the week."""

    day: str
    meal_type: MealType
    items: tuple[MenuItem, ...] = ()

    def as_dict(self) -> dict:
        return {
            "day": self.day,
            "meal_type": self.meal_type.value,
            "items": [i.as_dict() for i in self.items],
        }
