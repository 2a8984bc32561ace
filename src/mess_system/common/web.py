from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, StorageError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Please log in to continue", 401)
            if session.get("role") != role.value:
                return error_response("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = role_required(Role.ADMIN)
student_required = role_required(Role.STUDENT)


def current_role() -> Role:
    return Role(session.get("role"))


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def date_arg(name: str, default: Optional[date] = None) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e):
        return error_response(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication(e):
        return error_response(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e):
        return error_response(str(e), 403)

    @app.errorhandler(StorageError)
    def _storage(e):
        logger.exception("Storage failure on %s %s", request.method, request.path)
        return error_response("Storage is unavailable, please retry", 503)

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return error_response(e.description or e.name, e.code or 500)

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if current_app.config.get("DEBUG"):
            return error_response(f"System error: {e}", 500)
        return error_response("System error", 500)
