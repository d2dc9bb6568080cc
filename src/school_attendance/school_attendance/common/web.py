"""Helpers shared by the JSON controllers: session actor, auth decorators, error mapping."""

from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.service import SessionUser

SESSION_KEY = "user"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConfigurationError, 422),
)


def current_actor() -> SessionUser:
    data = session.get(SESSION_KEY)
    if not data:
        raise AuthenticationError("Silakan login terlebih dahulu")
    return SessionUser.from_session(data)


def json_body() -> dict:
    """Request JSON object; an absent body reads as {}."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Format data tidak valid")
    return body


def json_ok(payload: dict | None = None, status: int = 200):
    body = {"success": True}
    body.update(payload or {})
    return jsonify(body), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_status(exc: DomainError) -> int:
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, exc_type):
            return status
    return 400


def handle_errors(view):
    """Translate domain exceptions into the JSON error shape; log anything unexpected."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            current_app.logger.warning("%s: %s", type(e).__name__, e)
            return json_error(str(e), error_status(e))
        except Exception as e:
            current_app.logger.exception("unexpected error in %s", view.__name__)
            if bool(current_app.config.get("DEBUG", False)):
                return json_error(f"Terjadi kesalahan pada server: {e}", 500)
            return json_error("Terjadi kesalahan pada server", 500)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if SESSION_KEY not in session:
            return json_error("Silakan login terlebih dahulu", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if SESSION_KEY not in session:
            return json_error("Silakan login terlebih dahulu", 401)
        if session[SESSION_KEY].get("role") != Role.ADMIN.value:
            return json_error("Anda tidak memiliki akses", 403)
        return view(*args, **kwargs)

    return wrapper
