from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_role, json_body, student_required
from ..container import Container
from ..core.constants import FEEDBACK_CATEGORIES


def register(app: Flask, container: Container) -> None:
    @app.route("/api/feedback/categories", endpoint="feedback_categories")
    def feedback_categories():
        return jsonify(
            {"success": True, "categories": [{"value": k, "label": v} for k, v in FEEDBACK_CATEGORIES.items()]}
        )

    @app.route("/api/feedback", methods=["POST"], endpoint="submit_feedback")
    @student_required
    def submit_feedback():
        data = json_body()
        entry = container.feedback_service.submit(
            current_role=current_role(),
            student_id=int(session["student_id"]),
            category=str(data.get("category") or ""),
            message=str(data.get("message") or ""),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "feedback": entry.as_dict(),
                    "message": "Your feedback has been submitted successfully!",
                }
            ),
            201,
        )

    @app.route("/api/admin/feedback", endpoint="admin_feedback")
    @admin_required
    def admin_feedback():
        entries = container.feedback_service.list_feedback(
            current_role=current_role(),
            status=request.args.get("status", "all"),
        )
        return jsonify({"success": True, "feedback": [f.as_dict() for f in entries]})

    @app.route("/api/admin/feedback/<int:feedback_id>/toggle", methods=["POST"], endpoint="toggle_feedback")
    @admin_required
    def toggle_feedback(feedback_id: int):
        entry = container.feedback_service.toggle(current_role=current_role(), feedback_id=feedback_id)
        return jsonify({"success": True, "feedback": entry.as_dict()})
