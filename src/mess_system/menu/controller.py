from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_role, json_body, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/menu", endpoint="weekly_menu")
    def weekly_menu():
        slots = container.menu_service.get_week()
        return jsonify({"success": True, "menu": [s.as_dict() for s in slots]})

    @app.route("/api/menu/today", endpoint="today_menu")
    @login_required
    def today_menu():
        return jsonify({"success": True, "menu": container.menu_service.today()})

    @app.route("/api/menu/<day>/<meal>", methods=["PUT"], endpoint="update_menu")
    @admin_required
    def update_menu(day: str, meal: str):
        items = json_body().get("items")
        if not isinstance(items, list):
            raise ValidationError("items must be a list")

        slot = container.menu_service.update_slot(
            current_role=current_role(),
            day=day,
            meal_type=meal,
            items=items,
        )
        return jsonify({"success": True, "slot": slot.as_dict()})
