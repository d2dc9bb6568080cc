from __future__ import annotations

from typing import Protocol

DEFAULT_SETTINGS = {
    "nama_sekolah": "",
    "kabupaten": "",
    "alamat_sekolah": "",
    "logo_sekolah": "",
}


class SettingsRepository(Protocol):
    """Free key/value application settings (school name, address, ...)."""

    def get_all(self) -> dict[str, str]:
        raise NotImplementedError
