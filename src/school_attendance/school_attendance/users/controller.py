from __future__ import annotations

from flask import Flask, session

from ..common.web import SESSION_KEY, admin_required, current_actor, handle_errors, json_body, json_ok, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from ..students.service import NewStudent
from .service import NewStaff


def _bulk_rows(body: dict):
    rows = body.get("bulk")
    if not isinstance(rows, list):
        raise ValidationError("Data impor wajib berupa daftar")
    return rows


def register(app: Flask, container: Container) -> None:
    def _snapshot() -> dict:
        return {"data": container.snapshot_service.build(current_actor())}

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    @handle_errors
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(str(body.get("username") or ""), str(body.get("password") or ""))

        session.clear()
        session.permanent = bool(body.get("remember"))
        session[SESSION_KEY] = s_user.to_session()

        app.logger.info("login ok: user_id=%s role=%s", s_user.user_id, s_user.role.value)
        return json_ok({"user": s_user.to_session(), "screens": list(container.policy.screens(s_user))})

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return json_ok({"message": "Anda telah keluar."})

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required
    @handle_errors
    def me():
        actor = current_actor()
        return json_ok({"user": actor.to_session(), "screens": list(container.policy.screens(actor))})

    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    @admin_required
    @handle_errors
    def list_users():
        return json_ok({"users": [u.to_dict() for u in container.user_service.list_users()]})

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @admin_required
    @handle_errors
    def create_user():
        body = json_body()
        role = current_actor().role
        if "bulk" in body:
            rows = [NewStaff.from_payload(r) for r in _bulk_rows(body)]
            container.user_service.create_staff_many(current_role=role, rows=rows)
        else:
            data = NewStaff.from_payload(body)
            container.user_service.create_staff(
                current_role=role,
                username=data.username,
                full_name=data.full_name,
                password=data.password,
                role=data.role,
                class_label=data.class_label,
            )
        return json_ok(_snapshot(), 201)

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="api_users_update")
    @admin_required
    @handle_errors
    def update_user(user_id: int):
        data = NewStaff.from_payload(json_body())
        container.user_service.update_user(current_role=current_actor().role, user_id=user_id, data=data)
        return json_ok(_snapshot())

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_users_delete")
    @admin_required
    @handle_errors
    def delete_user(user_id: int):
        actor = current_actor()
        container.user_service.delete_user(current_role=actor.role, current_user_id=actor.user_id, user_id=user_id)
        return json_ok(_snapshot())

    @app.route("/api/students", methods=["POST"], endpoint="api_students_create")
    @admin_required
    @handle_errors
    def create_student():
        body = json_body()
        role = current_actor().role
        if "bulk" in body:
            rows = [NewStudent.from_payload(r) for r in _bulk_rows(body)]
            container.student_service.bulk_create(current_role=role, rows=rows)
        else:
            container.student_service.create_student(current_role=role, data=NewStudent.from_payload(body))
        return json_ok(_snapshot(), 201)

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="api_students_update")
    @admin_required
    @handle_errors
    def update_student(student_id: int):
        data = NewStudent.from_payload(json_body())
        container.student_service.update_student(current_role=current_actor().role, student_id=student_id, data=data)
        return json_ok(_snapshot())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="api_students_delete")
    @admin_required
    @handle_errors
    def delete_student(student_id: int):
        container.student_service.delete_student(current_role=current_actor().role, student_id=student_id)
        return json_ok(_snapshot())
