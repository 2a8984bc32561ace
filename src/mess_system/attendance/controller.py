from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local
from ..common.web import admin_required, error_response, json_body, login_required, student_required
from ..container import Container
from ..core.enums import ScanOutcome

_STATUS_BY_OUTCOME = {
    ScanOutcome.RECORDED: 200,
    ScanOutcome.DUPLICATE: 409,
    ScanOutcome.NOT_FOUND: 404,
    ScanOutcome.DATA_MISMATCH: 400,
    ScanOutcome.DECODE_FAILURE: 400,
    ScanOutcome.NOT_MEAL_TIME: 422,
    ScanOutcome.STORAGE_FAILURE: 503,
}


def register(app: Flask, container: Container) -> None:
    def _respond(result):
        return jsonify(result.as_dict()), _STATUS_BY_OUTCOME[result.outcome]

    def _upload():
        if "image" not in request.files:
            return None
        return request.files["image"].stream

    @app.route("/api/meals/current", endpoint="current_meal")
    @login_required
    def current_meal():
        now = now_local()
        period = container.scan_service.current_period(now=now)
        window = container.classifier.window_for(period.meal_type) if period.meal_type else None
        return jsonify(
            {
                "success": True,
                "meal": period.value,
                "window": window.label if window else None,
                "now": now.isoformat(timespec="seconds"),
                "windows": {w.meal_type.value: w.label for w in container.classifier.windows},
            }
        )

    @app.route("/api/scan", methods=["POST"], endpoint="scan_code")
    @admin_required
    def scan_code():
        code = str(json_body().get("code") or "").strip()
        if not code:
            return error_response("QR code must not be empty", 400)
        return _respond(container.scan_service.process(code))

    @app.route("/api/scan/image", methods=["POST"], endpoint="scan_image")
    @admin_required
    def scan_image():
        stream = _upload()
        if stream is None:
            return error_response("Missing image file", 400)
        return _respond(container.scan_service.process_image(stream))

    @app.route("/api/scan/session", endpoint="scan_session_status")
    @admin_required
    def scan_session_status():
        return jsonify({"success": True, "active": container.scan_session.active})

    @app.route("/api/scan/session/start", methods=["POST"], endpoint="scan_session_start")
    @admin_required
    def scan_session_start():
        generation = container.scan_session.start()
        return jsonify({"success": True, "active": True, "session": generation})

    @app.route("/api/scan/session/stop", methods=["POST"], endpoint="scan_session_stop")
    @admin_required
    def scan_session_stop():
        container.scan_session.stop()
        return jsonify({"success": True, "active": False})

    @app.route("/api/scan/session/frame", methods=["POST"], endpoint="scan_session_frame")
    @admin_required
    def scan_session_frame():
        stream = _upload()
        if stream is None:
            return error_response("Missing image file", 400)

        result = container.scan_session.submit_frame(stream)
        if result is None:
            return jsonify({"success": False, "outcome": None, "message": "Scanner is not running; frame discarded"}), 409
        body = result.as_dict()
        body["active"] = container.scan_session.active
        return jsonify(body), _STATUS_BY_OUTCOME[result.outcome]

    @app.route("/api/me/scans", endpoint="me_scans")
    @student_required
    def me_scans():
        student = container.students_repo.get_by_id(int(session["student_id"]))
        if not student:
            return error_response("Student not found", 404)
        return jsonify({"success": True, "scans": container.report_service.student_history(student.roll_no)})
