from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import Semester


@dataclass(frozen=True)
class AcademicPeriod:
    """Tahun ajaran: one school year split into two inclusive semester ranges."""

    period_id: int
    label: str
    odd_start: date
    odd_end: date
    even_start: date
    even_end: date

    def semester_range(self, semester: Semester) -> tuple[date, date]:
        if semester == Semester.ODD:
            return self.odd_start, self.odd_end
        return self.even_start, self.even_end

    def contains(self, value: date, semester: Semester) -> bool:
        start, end = self.semester_range(semester)
        return start <= value <= end

    def to_dict(self) -> dict:
        return {
            "id": self.period_id,
            "tahun_ajaran": self.label,
            "semester_ganjil_start": self.odd_start.isoformat(),
            "semester_ganjil_end": self.odd_end.isoformat(),
            "semester_genap_start": self.even_start.isoformat(),
            "semester_genap_end": self.even_end.isoformat(),
        }


@dataclass(frozen=True)
class PeriodMatch:
    period: AcademicPeriod
    semester: Semester

    @property
    def label(self) -> str:
        return self.period.label

    def to_dict(self) -> dict:
        return {
            "id": self.period.period_id,
            "tahun_ajaran": self.period.label,
            "semester": self.semester.value,
        }
