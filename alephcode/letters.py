from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping


class Mode(str, Enum):
    """Where the alphabet starts counting: aleph = 0 or aleph = 1."""

    ALEPH_ZERO = "aleph-zero"
    ALEPH_ONE = "aleph-one"

    @classmethod
    def parse(cls, value: "Mode | str") -> "Mode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown mode {value!r}; expected one of {[m.value for m in cls]}") from None


# Ordinal position of each base letter (1-based).
BASE_LETTER_VALUES: dict[str, int] = {
    "א": 1,
    "ב": 2,
    "ג": 3,
    "ד": 4,
    "ה": 5,
    "ו": 6,
    "ז": 7,
    "ח": 8,
    "ט": 9,
    "י": 10,
    "כ": 11,
    "ל": 12,
    "מ": 13,
    "נ": 14,
    "ס": 15,
    "ע": 16,
    "פ": 17,
    "צ": 18,
    "ק": 19,
    "ר": 20,
    "ש": 21,
    "ת": 22,
}

# Final forms -> base letter.
HEB_FINALS: dict[str, str] = {
    "ך": "כ",
    "ם": "מ",
    "ן": "נ",
    "ף": "פ",
    "ץ": "צ",
}


@dataclass(frozen=True)
class LetterRecord:
    units: int
    tens: int
    hundreds: int


LetterTable = Mapping[str, LetterRecord]


def _aleph_zero_record(m: int) -> LetterRecord:
    n = m - 1
    units = n
    tens = n if n <= 9 else 10 * (n - 9)
    if n <= 10:
        hundreds = n
    elif n <= 19:
        hundreds = 10 * (n - 9)
    else:
        hundreds = 100 * (n - 18)
    return LetterRecord(units, tens, hundreds)


def _aleph_one_record(m: int) -> LetterRecord:
    if m <= 10:
        return LetterRecord(m, m, m)
    tens = 10 * (m - 9)
    hundreds = tens if m <= 19 else 100 * (m - 18)
    return LetterRecord(m, tens, hundreds)


def build_letter_table(mode: Mode | str) -> LetterTable:
    """
    Build the letter -> (units, tens, hundreds) table for `mode`.

    The units band is the raw ordinal, the tens band groups letters ten at a
    time scaled by 10, and the hundreds band scales the top tier by 100, so
    e.g. under aleph-one: י=10/10/10, כ=11/20/20, ר=20/110/200.

    Final forms get their own record object carrying the base letter's values.
    The table is built once per mode and returned read-only.
    """
    return _letter_table(Mode.parse(mode))


@lru_cache(maxsize=None)
def _letter_table(mode: Mode) -> LetterTable:
    make = _aleph_zero_record if mode is Mode.ALEPH_ZERO else _aleph_one_record

    table: dict[str, LetterRecord] = {ch: make(m) for ch, m in BASE_LETTER_VALUES.items()}
    for final_form, base in HEB_FINALS.items():
        table[final_form] = replace(table[base])
    return MappingProxyType(table)
