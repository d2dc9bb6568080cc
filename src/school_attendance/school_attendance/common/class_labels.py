"""Ordering of free-text class labels such as "VII-A", "VIII B" or "10-IPA1".

Labels are sorted by grade numeral (roman or arabic) and then by section.
Labels that do not parse sort after every parsed label.
"""

from __future__ import annotations

import re
from typing import Iterable

from ..core.exceptions import ValidationError

_LABEL_RE = re.compile(r"^([IVX]+|[0-9]+)[\s-]*([A-Z0-9]+)", re.IGNORECASE)
_ROMAN = {"I": 1, "V": 5, "X": 10}
UNPARSED_LEVEL = 99


def roman_to_int(value: str) -> int:
    total = 0
    value = value.upper()
    for i, ch in enumerate(value):
        current = _ROMAN[ch]
        nxt = _ROMAN.get(value[i + 1]) if i + 1 < len(value) else None
        if nxt and current < nxt:
            total -= current
        else:
            total += current
    return total


def class_sort_key(label: str) -> tuple[int, str]:
    match = _LABEL_RE.match(label or "")
    if not match:
        return UNPARSED_LEVEL, label or ""

    level_s, section = match.group(1), match.group(2).upper()
    level = int(level_s) if level_s.isdigit() else roman_to_int(level_s)
    return level, section


def sort_class_labels(labels: Iterable[str]) -> list[str]:
    return sorted(set(labels), key=class_sort_key)


def clean_class_label(value) -> str:
    """Stripped label from request input; "" when absent."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError("Kelas tidak valid")
    return value.strip()
