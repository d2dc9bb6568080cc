from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CaseNote:
    """Counseling case note about one student."""

    case_id: int
    student_id: int
    case_date: date
    description: str
    follow_up: str
    reported_by: int

    def to_dict(self) -> dict:
        return {
            "id_kasus": self.case_id,
            "id_siswa": self.student_id,
            "tanggal_kasus": self.case_date.isoformat(),
            "kasus": self.description,
            "tindak_lanjut": self.follow_up or "",
            "dilaporkan_oleh": self.reported_by,
        }
