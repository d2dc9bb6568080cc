from __future__ import annotations

from datetime import date

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} tidak boleh kosong")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} minimal {min_len} karakter")
    return value


def require_date_order(start: date, end: date, field_name: str) -> None:
    if end < start:
        raise ValidationError(f"{field_name}: tanggal selesai harus >= tanggal mulai")
