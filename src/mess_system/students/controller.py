from __future__ import annotations

import io
from datetime import timedelta

from flask import Flask, jsonify, request, send_file, session

from ..common.web import admin_required, current_role, error_response, json_body, student_required
from ..container import Container
from ..core.enums import RegistrationStatus, Role
from ..core.exceptions import ValidationError
from .service import SignupForm


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        try:
            role = Role(str(data.get("role") or Role.STUDENT.value))
        except ValueError:
            raise ValidationError("Account type is not valid")

        s_user = container.auth_service.authenticate(
            str(data.get("email") or ""),
            str(data.get("password") or ""),
            role=role,
        )

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["email"] = s_user.email
        session["role"] = s_user.role.value
        if s_user.student_id is not None:
            session["student_id"] = s_user.student_id

        return jsonify({"success": True, "role": s_user.role.value, "name": s_user.name})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/students/register", methods=["POST"], endpoint="student_register")
    def student_register():
        data = json_body()
        form = SignupForm(
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            password=str(data.get("password") or ""),
            confirm_password=str(data.get("confirmPassword") or data.get("confirm_password") or ""),
            roll_no=str(data.get("rollNo") or data.get("roll_no") or ""),
            branch=str(data.get("branch") or ""),
            hostel_name=str(data.get("hostelName") or data.get("hostel_name") or ""),
            mess_name=str(data.get("messName") or data.get("mess_name") or ""),
            room_no=str(data.get("roomNo") or data.get("room_no") or ""),
            phone=str(data.get("phone") or ""),
            photo=data.get("photo"),
        )
        student_id = container.registration_service.register(form)
        return (
            jsonify(
                {
                    "success": True,
                    "student_id": student_id,
                    "message": "Registration successful! Please wait for admin approval.",
                }
            ),
            201,
        )

    @app.route("/api/me", endpoint="me")
    @student_required
    def me():
        student = container.students_repo.get_by_id(int(session["student_id"]))
        if not student:
            return error_response("Student not found", 404)
        return jsonify({"success": True, "student": student.public_view()})

    @app.route("/api/me/qr", endpoint="me_qr")
    @student_required
    def me_qr():
        student = container.students_repo.get_by_id(int(session["student_id"]))
        if not student:
            return error_response("Student not found", 404)
        png = container.credential_service.render_png(student)
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/api/admin/registrations", endpoint="admin_registrations")
    @admin_required
    def admin_registrations():
        try:
            status = RegistrationStatus(request.args.get("status") or RegistrationStatus.PENDING.value)
        except ValueError:
            raise ValidationError("Registration status is not valid")

        students = container.registration_service.list_by_status(status)
        return jsonify({"success": True, "registrations": [s.public_view() for s in students]})

    @app.route("/api/admin/registrations/<int:student_id>/approve", methods=["POST"], endpoint="approve_registration")
    @admin_required
    def approve_registration(student_id: int):
        student = container.registration_service.approve(current_role=current_role(), student_id=student_id)
        return jsonify({"success": True, "student": student.public_view()})

    @app.route("/api/admin/registrations/<int:student_id>/reject", methods=["POST"], endpoint="reject_registration")
    @admin_required
    def reject_registration(student_id: int):
        student = container.registration_service.reject(current_role=current_role(), student_id=student_id)
        return jsonify({"success": True, "student": student.public_view()})

    @app.route("/api/admin/students", endpoint="admin_students")
    @admin_required
    def admin_students():
        students = container.registration_service.search_roster(
            term=request.args.get("q", ""),
            branch=request.args.get("branch", ""),
            hostel=request.args.get("hostel", ""),
        )
        return jsonify({"success": True, "students": [s.public_view() for s in students]})
