from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..attendance.model import ScanFilter
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, date_arg, json_body
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import MealType
from ..core.exceptions import ValidationError
from .service import HEAD_COUNT_FIELDS, SCAN_FIELDS, rows_to_csv


def register(app: Flask, container: Container) -> None:
    def _default_range():
        end = date_arg("end", now_local().date())
        start = date_arg("start", end - timedelta(days=DEFAULT_REPORT_DAYS - 1))
        if start > end:
            raise ValidationError("Start date must not be after end date")
        return start, end

    def _csv(payload: bytes, filename: str):
        return app.response_class(
            payload,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/headcount", endpoint="headcount_report")
    @admin_required
    def headcount_report():
        start, end = _default_range()
        report = container.report_service.head_count_report(start=start, end=end)
        return jsonify({"success": True, "rows": report.rows, "summary": report.summary})

    @app.route("/api/admin/headcount.csv", endpoint="headcount_csv")
    @admin_required
    def headcount_csv():
        start, end = _default_range()
        report = container.report_service.head_count_report(start=start, end=end)
        return _csv(rows_to_csv(report.rows, HEAD_COUNT_FIELDS), f"headcount_{start}_{end}.csv")

    @app.route("/api/admin/scans", endpoint="scan_report")
    @admin_required
    def scan_report():
        report = container.report_service.scan_report(
            start=date_arg("start"),
            end=date_arg("end"),
            search=request.args.get("q", ""),
        )
        return jsonify({"success": True, "rows": report.rows, "summary": report.summary})

    @app.route("/api/admin/scans.csv", endpoint="scan_csv")
    @admin_required
    def scan_csv():
        report = container.report_service.scan_report(
            start=date_arg("start"),
            end=date_arg("end"),
            search=request.args.get("q", ""),
        )
        return _csv(rows_to_csv(report.rows, SCAN_FIELDS), "scan_records.csv")

    @app.route("/api/admin/scans/purge", methods=["POST"], endpoint="purge_scans")
    @admin_required
    def purge_scans():
        data = json_body()
        try:
            start = parse_iso_date(data["start"]) if data.get("start") else None
            end = parse_iso_date(data["end"]) if data.get("end") else None
        except ValueError:
            raise ValidationError("Dates must be YYYY-MM-DD")

        meal_type = None
        if data.get("meal_type"):
            try:
                meal_type = MealType(str(data["meal_type"]).lower())
            except ValueError:
                raise ValidationError("Meal type is not valid")

        scan_filter = ScanFilter(
            start=start,
            end=end,
            student_id=str(data.get("student_id") or "").strip() or None,
            meal_type=meal_type,
        )
        removed = container.aggregator.purge(scan_filter)
        return jsonify({"success": True, "removed": removed})

    @app.route("/api/admin/headcount/reconcile", methods=["POST"], endpoint="reconcile_headcount")
    @admin_required
    def reconcile_headcount():
        repaired = container.aggregator.reconcile()
        return jsonify({"success": True, "repaired": repaired})
