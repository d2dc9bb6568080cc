from datetime import date

import pytest

from src.school_attendance.school_attendance.attendance.model import AttendanceEntry
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Semester
from src.school_attendance.school_attendance.core.exceptions import AuthorizationError, ValidationError
from src.school_attendance.school_attendance.reports.service import (
    REPORT_DAILY,
    REPORT_MONTHLY,
    REPORT_WEEKLY,
    attendance_percentage,
    report_range,
)

MONDAY = date(2024, 9, 2)
TUESDAY = date(2024, 9, 3)


@pytest.fixture
def filled(services, actors):
    svc = services.attendance_service
    svc.submit(
        actors["bk"],
        work_date=MONDAY,
        class_label="VII-A",
        entries=[
            AttendanceEntry(student_id=2, status=AttendanceStatus.LATE),
            AttendanceEntry(student_id=3, status=AttendanceStatus.SICK, note="Demam"),
        ],
    )
    svc.submit(
        actors["bk"],
        work_date=TUESDAY,
        class_label="VII-A",
        entries=[AttendanceEntry(student_id=3, status=AttendanceStatus.UNEXCUSED)],
    )
    svc.submit(actors["bk"], work_date=MONDAY, class_label="VII-B", entries=[])
    svc.validate_class_day(actors["bk"], class_label="VII-B", work_date=MONDAY)
    return services


def test_report_ranges():
    assert report_range(REPORT_DAILY, MONDAY) == (MONDAY, MONDAY)
    assert report_range(REPORT_WEEKLY, TUESDAY) == (MONDAY, date(2024, 9, 7))
    assert report_range(REPORT_MONTHLY, TUESDAY) == (date(2024, 9, 1), date(2024, 9, 30))
    with pytest.raises(ValidationError):
        report_range("tahunan", MONDAY)


def test_percentage_counts_present_and_late():
    assert attendance_percentage({"Hadir": 1, "Terlambat": 1, "Sakit": 2}, 4) == 50.0
    assert attendance_percentage({}, 0) == 0.0


def test_daily_class_report_with_validation_status(filled, actors):
    data = filled.report_service.build_class_report(actors["principal"], start=MONDAY, end=MONDAY)

    by_class = {row["kelas"]: row for row in data.summary}
    assert [row["kelas"] for row in data.summary] == ["VII-A", "VII-B", "VIII-A"]
    assert by_class["VII-A"]["Hadir"] == 1
    assert by_class["VII-A"]["Terlambat"] == 1
    assert by_class["VII-A"]["Sakit"] == 1
    assert by_class["VII-A"]["total_absen"] == 3
    assert by_class["VII-A"]["status_validasi"] == "Belum Valid"
    assert by_class["VII-B"]["status_validasi"] == "Valid"
    assert by_class["VIII-A"]["status_validasi"] == "N/A"
    assert len(data.rows) == 5


def test_weekly_class_report_has_no_validation_status(filled, actors):
    data = filled.report_service.build_class_report(actors["admin"], start=MONDAY, end=date(2024, 9, 7), class_label="VII-A")

    assert len(data.summary) == 1
    assert data.summary[0]["total_absen"] == 6
    assert data.summary[0]["status_validasi"] == "N/A"


def test_homeroom_class_report_is_pinned_to_own_class(filled, actors):
    data = filled.report_service.build_class_report(actors["homeroom"], start=MONDAY, end=TUESDAY, class_label="VII-B")

    assert [row["kelas"] for row in data.summary] == ["VII-A"]


def test_student_report_percentage(filled, actors):
    data = filled.report_service.build_student_report(actors["homeroom"], start=MONDAY, end=TUESDAY)

    by_name = {row["nama"]: row for row in data.summary}
    assert by_name["Budi Santoso"]["persentase"] == 100.0
    assert by_name["Citra Lestari"]["persentase"] == 100.0
    assert by_name["Dewi Anggraini"]["persentase"] == 0.0
    assert by_name["Dewi Anggraini"]["total"] == 2


def test_student_report_needs_a_class_for_school_wide_roles(filled, actors):
    with pytest.raises(ValidationError):
        filled.report_service.build_student_report(actors["bk"], start=MONDAY, end=TUESDAY)


def test_students_only_get_personal_reports(filled, actors):
    with pytest.raises(AuthorizationError):
        filled.report_service.build_class_report(actors["student"], start=MONDAY, end=TUESDAY)

    data = filled.report_service.build_personal_report(actors["student"], start=MONDAY, end=TUESDAY)
    assert [row["id_siswa"] for row in data.rows] == [2, 2]
    assert data.summary[0]["Terlambat"] == 1


def test_personal_report_period_filter(filled, actors):
    data = filled.report_service.build_personal_report(
        actors["student"], start=MONDAY, end=TUESDAY, period_label="2024/2025", semester=Semester.EVEN
    )

    assert data.rows == []
    assert data.summary[0]["persentase"] == 0.0


def test_staff_have_no_personal_report(filled, actors):
    with pytest.raises(AuthorizationError):
        filled.report_service.build_personal_report(actors["teacher"], start=MONDAY, end=TUESDAY)


def test_start_after_end_is_rejected(filled, actors):
    with pytest.raises(ValidationError):
        filled.report_service.build_class_report(actors["admin"], start=TUESDAY, end=MONDAY)
