from __future__ import annotations

import json
from typing import Sequence

from ..common.datetime_utils import now_local
from ..core.enums import MealType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import MenuItem, MenuSlot
from .repository import MenuRepository


class MySQLMenuRepository(MenuRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_slots(self) -> Sequence[MenuSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT day_of_week, meal_type, items FROM weekly_menu")
            rows = fetchall(cur)

        slots = []
        for r in rows:
            raw_items = r["items"]
            if isinstance(raw_items, (bytes, bytearray)):
                raw_items = raw_items.decode("utf-8")
            items = json.loads(raw_items) if isinstance(raw_items, str) else (raw_items or [])
            slots.append(
                MenuSlot(
                    day=r["day_of_week"],
                    meal_type=MealType(r["meal_type"]),
                    items=tuple(
                        MenuItem(
                            name=i.get("name", ""),
                            description=i.get("description", ""),
                            is_veg=bool(i.get("is_veg", True)),
                        )
                        for i in items
                    ),
                )
            )
        return slots

    def save_slot(self, *, day: str, meal_type: MealType, items: Sequence[MenuItem]) -> None:
        payload = json.dumps([i.as_dict() for i in items])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO weekly_menu(day_of_week, meal_type, items, updated_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE items=VALUES(items), updated_at=VALUES(updated_at)
                """,
                (day, meal_type.value, payload, now_local()),
            )
