from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class MarkRecord:
    student_id: int  # 5 digits, first digit 1-5
    extracted_strings: list[str] | None
    practical_mark: int | None
    theoretical_mark: int | None
    exam_mark: int | None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "MarkRecord":
        strings = d.get("extracted_strings")
        return MarkRecord(
            student_id=int(d["student_id"]),
            extracted_strings=(None if strings is None else [str(s) for s in strings]),
            practical_mark=(None if d.get("practical_mark") is None else int(d["practical_mark"])),
            theoretical_mark=(None if d.get("theoretical_mark") is None else int(d["theoretical_mark"])),
            exam_mark=(None if d.get("exam_mark") is None else int(d["exam_mark"])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "student_id": self.student_id,
            "extracted_strings": None if self.extracted_strings is None else list(self.extracted_strings),
            "practical_mark": self.practical_mark,
            "theoretical_mark": self.theoretical_mark,
            "exam_mark": self.exam_mark,
        }


@dataclass(frozen=True, slots=True)
class MetaInfoPatch:
    """
    Metadata found while scanning rows. Unset fields (None) mean "no match",
    never "clear the field".
    """

    semester: str | None = None  # "1" | "2" | "3"
    year: str | None = None  # "YYYY/YYYY"
    subject: str | None = None
    students: str | None = None  # digit string

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def then(self, later: "MetaInfoPatch") -> "MetaInfoPatch":
        """Combine two patches; fields set in `later` win."""
        return MetaInfoPatch(
            semester=later.semester if later.semester is not None else self.semester,
            year=later.year if later.year is not None else self.year,
            subject=later.subject if later.subject is not None else self.subject,
            students=later.students if later.students is not None else self.students,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class MetaInfo:
    semester: str | None = None
    year: str | None = None
    subject: str | None = None
    students: str | None = None

    def apply(self, patch: MetaInfoPatch) -> "MetaInfo":
        # last-non-null-wins
        return MetaInfo(
            semester=patch.semester if patch.semester is not None else self.semester,
            year=patch.year if patch.year is not None else self.year,
            subject=patch.subject if patch.subject is not None else self.subject,
            students=patch.students if patch.students is not None else self.students,
        )

    def with_defaults(self, *, semester: str | None = None, year: str | None = None) -> "MetaInfo":
        """Fill only the fields that are still unset."""
        out = self
        if semester is not None and out.semester is None:
            out = replace(out, semester=semester)
        if year is not None and out.year is None:
            out = replace(out, year=year)
        return out

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "MetaInfo":
        def _opt(k: str) -> str | None:
            v = d.get(k)
            return None if v is None else str(v)

        return MetaInfo(semester=_opt("semester"), year=_opt("year"), subject=_opt("subject"), students=_opt("students"))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
