from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from contracts.glyphs import Row
from contracts.marks import MarkRecord, MetaInfoPatch

from .extract_meta import scan_row_meta

_EASTERN_DIGITS = "٠١٢٣٤٥٦٧٨٩"
_TO_WESTERN = str.maketrans(_EASTERN_DIGITS, "0123456789")

STUDENT_ID_PATTERN = re.compile(r"[1-5][0-9]{4}")
_SINGLE_DIGIT = re.compile(r"[0-9]")
_MARK_PATTERN = re.compile(r"[0-9]{1,3}")

ID_DIGIT_CELLS = 5
TEXT_CHUNK_GAP = 9.8


def to_western_digits(s: str) -> str:
    return s.translate(_TO_WESTERN)


def is_student_id(s: str) -> bool:
    return STUDENT_ID_PATTERN.fullmatch(s) is not None


@dataclass(frozen=True, slots=True)
class ResolvedStudentId:
    student_id: int
    consumed: int  # leading row cells that make up the identifier


def _reconstruct_from_digit_cells(row: Row) -> str | None:
    # Identifier split one digit per cell: cells 4..0 hold its digits high to low.
    if len(row) < ID_DIGIT_CELLS:
        return None
    digits: list[str] = []
    for cell in reversed(row[:ID_DIGIT_CELLS]):
        digit = to_western_digits(cell.value)
        if _SINGLE_DIGIT.fullmatch(digit) is None:
            break
        digits.append(digit)
    if len(digits) != ID_DIGIT_CELLS:
        return None
    candidate = "".join(digits)
    return candidate if is_student_id(candidate) else None


def resolve_student_id(row: Row) -> ResolvedStudentId | None:
    """
    The student identifier of a row, or None if the row is not a data row.
    The first cell must be numeral-like (not right-to-left script).
    """
    if not row or row[0].is_rtl:
        return None

    numeric_id = to_western_digits(row[0].value)
    if is_student_id(numeric_id):
        return ResolvedStudentId(student_id=int(numeric_id), consumed=1)

    rebuilt = _reconstruct_from_digit_cells(row)
    if rebuilt is not None:
        return ResolvedStudentId(student_id=int(rebuilt), consumed=ID_DIGIT_CELLS)
    return None


def _assign_marks(marks: list[int]) -> tuple[int | None, int | None, int | None]:
    if len(marks) == 3:
        return marks[0], marks[1], marks[2]
    if marks:
        return None, None, marks[-1]
    return None, None, None


def extract_record_from_row(row: Row) -> MarkRecord | None:
    resolved = resolve_student_id(row)
    if resolved is None:
        return None

    strings: list[str] = []
    marks: list[int] = []
    chunk = ""
    last_x: float | None = None

    for cell in row[resolved.consumed:]:
        # Text is collected only until the first mark.
        if cell.is_rtl and not marks:
            text = cell.value.strip()
            if text == "" or (last_x is not None and abs(cell.x - last_x) > TEXT_CHUNK_GAP):
                if chunk.strip():
                    strings.append(chunk.strip())
                chunk = text
            else:
                chunk = f"{chunk} {text}" if chunk else text
            last_x = cell.x

        if not cell.is_rtl and _MARK_PATTERN.fullmatch(cell.value) is not None:
            marks.append(int(cell.value))

    if chunk.strip():
        strings.append(chunk.strip())

    practical, theoretical, exam = _assign_marks(marks)
    return MarkRecord(
        student_id=resolved.student_id,
        extracted_strings=strings or None,
        practical_mark=practical,
        theoretical_mark=theoretical,
        exam_mark=exam,
    )


def extract_marks_from_rows(rows: Iterable[Row]) -> tuple[list[MarkRecord], MetaInfoPatch]:
    """
    Scan every row for metadata and for a mark record.
    Rows without a valid identifier are dropped silently.
    """
    records: list[MarkRecord] = []
    patch = MetaInfoPatch()
    for row in rows:
        patch = patch.then(scan_row_meta(row))
        record = extract_record_from_row(row)
        if record is not None:
            records.append(record)
    return records, patch
