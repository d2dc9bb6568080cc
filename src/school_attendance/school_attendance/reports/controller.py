from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..common.datetime_utils import parse_date_arg, today_local
from ..common.web import current_actor, handle_errors, json_ok, login_required
from ..container import Container
from ..core.enums import AttendanceStatus, Semester
from ..core.exceptions import ValidationError
from .service import REPORT_DAILY, ReportData, report_range


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _range():
        """start/end win over kind+date; the default is today's daily report."""
        if request.args.get("start") or request.args.get("end"):
            return parse_date_arg(request.args.get("start"), "Tanggal mulai"), parse_date_arg(
                request.args.get("end"), "Tanggal akhir"
            )
        value = request.args.get("date")
        day = parse_date_arg(value) if value else today_local()
        return report_range(request.args.get("kind") or REPORT_DAILY, day)

    def _period_filter() -> dict:
        semester_s = request.args.get("semester")
        try:
            semester = Semester(semester_s) if semester_s else None
        except ValueError:
            raise ValidationError("Semester tidak valid")
        return {"period_label": request.args.get("tahun_ajaran") or None, "semester": semester}

    def _as_json(data: ReportData, start, end):
        return json_ok(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "rows": data.rows,
                "summary": data.summary,
            }
        )

    def _write_summary_csv(*, data: ReportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["kelas", *[s.value for s in AttendanceStatus], "total_absen", "total_siswa", "status_validasi"],
        )
        writer.writeheader()
        for row in data.summary:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/classes", methods=["GET"], endpoint="api_reports_classes")
    @login_required
    @handle_errors
    def class_report():
        start, end = _range()
        data = service.build_class_report(
            current_actor(), start=start, end=end, class_label=request.args.get("class_label"), **_period_filter()
        )
        return _as_json(data, start, end)

    @app.route("/api/reports/students", methods=["GET"], endpoint="api_reports_students")
    @login_required
    @handle_errors
    def student_report():
        start, end = _range()
        data = service.build_student_report(
            current_actor(), start=start, end=end, class_label=request.args.get("class_label"), **_period_filter()
        )
        return _as_json(data, start, end)

    @app.route("/api/reports/me", methods=["GET"], endpoint="api_reports_me")
    @login_required
    @handle_errors
    def personal_report():
        start, end = _range()
        data = service.build_personal_report(current_actor(), start=start, end=end, **_period_filter())
        return _as_json(data, start, end)

    @app.route("/api/reports/classes.csv", methods=["GET"], endpoint="api_reports_classes_csv")
    @login_required
    @handle_errors
    def class_report_csv():
        start, end = _range()
        data = service.build_class_report(
            current_actor(), start=start, end=end, class_label=request.args.get("class_label"), **_period_filter()
        )
        filename = f"laporan_absensi_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_summary_csv(data=data, filename=filename)
