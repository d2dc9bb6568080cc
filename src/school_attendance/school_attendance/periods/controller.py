from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_actor, handle_errors, json_body, json_ok, login_required
from ..container import Container
from .service import PeriodInput


def register(app: Flask, container: Container) -> None:
    service = container.period_service

    def _snapshot() -> dict:
        return {"data": container.snapshot_service.build(current_actor())}

    @app.route("/api/periods", methods=["GET"], endpoint="api_periods")
    @login_required
    @handle_errors
    def list_periods():
        return json_ok({"periods": [p.to_dict() for p in service.list_periods()]})

    @app.route("/api/periods/active", methods=["GET"], endpoint="api_periods_active")
    @login_required
    @handle_errors
    def active_period():
        match = service.active_selection()
        return json_ok({"active_period": match.to_dict() if match else None})

    @app.route("/api/periods", methods=["POST"], endpoint="api_periods_create")
    @admin_required
    @handle_errors
    def create_period():
        data = PeriodInput.from_payload(json_body())
        service.create(current_role=current_actor().role, data=data)
        return json_ok(_snapshot(), 201)

    @app.route("/api/periods/<int:period_id>", methods=["PUT"], endpoint="api_periods_update")
    @admin_required
    @handle_errors
    def update_period(period_id: int):
        data = PeriodInput.from_payload(json_body())
        service.update(current_role=current_actor().role, period_id=period_id, data=data)
        return json_ok(_snapshot())

    @app.route("/api/periods/<int:period_id>", methods=["DELETE"], endpoint="api_periods_delete")
    @admin_required
    @handle_errors
    def delete_period(period_id: int):
        service.delete(current_role=current_actor().role, period_id=period_id)
        return json_ok(_snapshot())
