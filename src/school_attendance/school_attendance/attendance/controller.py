from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_date_arg
from ..common.web import current_actor, handle_errors, json_body, json_ok, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AttendanceEntry, RecordChange
from .states.base import SubmitMode


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _snapshot(actor) -> dict:
        return {"data": container.snapshot_service.build(actor)}

    @app.route("/api/data", methods=["GET"], endpoint="api_data")
    @login_required
    @handle_errors
    def fetch_all():
        return json_ok(_snapshot(current_actor()))

    @app.route("/api/attendance/classes", methods=["GET"], endpoint="api_attendance_classes")
    @login_required
    @handle_errors
    def selectable_classes():
        work_date = parse_date_arg(request.args.get("date"))
        classes = service.selectable_classes(current_actor(), work_date=work_date)
        return json_ok({"tanggal": work_date.isoformat(), "classes": classes})

    @app.route("/api/attendance/form", methods=["GET"], endpoint="api_attendance_form")
    @login_required
    @handle_errors
    def attendance_form():
        work_date = parse_date_arg(request.args.get("date"))
        form = service.open_form(current_actor(), work_date=work_date, class_label=request.args.get("class_label"))
        return json_ok({"form": form.to_dict()})

    @app.route("/api/attendance/board", methods=["GET"], endpoint="api_attendance_board")
    @login_required
    @handle_errors
    def validation_board():
        work_date = parse_date_arg(request.args.get("date"))
        cards = service.validation_board(current_actor(), work_date=work_date)
        return json_ok({"tanggal": work_date.isoformat(), "classes": [c.to_dict() for c in cards]})

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_submit")
    @login_required
    @handle_errors
    def submit_attendance():
        actor = current_actor()
        body = json_body()
        entries = body.get("entries")
        if not isinstance(entries, list):
            raise ValidationError("Data absensi wajib berupa daftar")

        result = service.submit(
            actor,
            work_date=parse_date_arg(body.get("date")),
            class_label=body.get("class_label"),
            entries=[AttendanceEntry.from_payload(e) for e in entries],
        )
        payload = {"result": result.to_dict(), "message": "Data absensi berhasil disimpan!"}
        payload.update(_snapshot(actor))
        return json_ok(payload, 201 if result.mode == SubmitMode.CREATE else 200)

    @app.route("/api/attendance", methods=["PUT"], endpoint="api_attendance_update")
    @login_required
    @handle_errors
    def update_attendance():
        actor = current_actor()
        body = json_body()
        action = body.get("action")

        if action == "bulk-update":
            records = body.get("records")
            if not isinstance(records, list):
                raise ValidationError("Data absensi wajib berupa daftar")
            affected = service.bulk_update(actor, [RecordChange.from_payload(r) for r in records])
            message = "Perubahan absensi berhasil disimpan!"
        elif action == "validate":
            affected = service.validate_class_day(
                actor,
                class_label=body.get("class_label", ""),
                work_date=parse_date_arg(body.get("date")),
            )
            message = "Absensi berhasil divalidasi!"
        elif action is None:
            service.update_record(actor, RecordChange.from_payload(body))
            affected = 1
            message = "Data absensi berhasil diperbarui!"
        else:
            raise ValidationError(f"Aksi tidak dikenal: {action}")

        payload = {"affected": affected, "message": message}
        payload.update(_snapshot(actor))
        return json_ok(payload)

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    @login_required
    @handle_errors
    def delete_attendance(attendance_id: int):
        actor = current_actor()
        service.delete_record(actor, attendance_id)
        return json_ok(_snapshot(actor))
