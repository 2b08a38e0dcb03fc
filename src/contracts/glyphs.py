from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

# Text direction flags reported by the document backend.
DIR_LTR = "ltr"
DIR_RTL = "rtl"
DIR_TTB = "ttb"


@dataclass(frozen=True, slots=True)
class RawGlyphItem:
    """
    A single rendered text fragment as reported by the document backend.

    `transform` is the 2x3 affine matrix (a, b, c, d, e, f):
    - b, c are the shear/rotation terms
    - e, f are the baseline origin (x, y) in page space
    """

    text: str
    direction: str  # "ltr" | "rtl" | "ttb"
    transform: tuple[float, float, float, float, float, float]
    width: float
    height: float

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RawGlyphItem":
        transform = d.get("transform") or [0, 0, 0, 0, 0, 0]
        if not isinstance(transform, (list, tuple)) or len(transform) != 6:
            raise TypeError("RawGlyphItem.transform must be a list of 6 numbers")
        m = tuple(float(v) for v in transform)
        return RawGlyphItem(
            text=str(d.get("text", "")),
            direction=str(d.get("direction", DIR_LTR)),
            transform=(m[0], m[1], m[2], m[3], m[4], m[5]),
            width=float(d.get("width", 0.0)),
            height=float(d.get("height", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "direction": self.direction,
            "transform": list(self.transform),
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True, slots=True)
class RawGlyphPage:
    page_num: int  # 1-indexed
    glyphs: list[RawGlyphItem]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RawGlyphPage":
        glyphs_raw = d.get("glyphs") or []
        if not isinstance(glyphs_raw, list):
            raise TypeError("RawGlyphPage.glyphs must be a list")
        return RawGlyphPage(page_num=int(d["page_num"]), glyphs=[RawGlyphItem.from_dict(g) for g in glyphs_raw])

    def to_dict(self) -> dict[str, Any]:
        return {"page_num": self.page_num, "glyphs": [g.to_dict() for g in self.glyphs]}


@dataclass(frozen=True, slots=True)
class RawGlyphDocument:
    """
    Already-flattened glyph records for a whole document, one entry per page.
    Produced by a glyph source engine (or loaded from a glyph dump).
    """

    source_relpath: str | None
    pages: list[RawGlyphPage]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RawGlyphDocument":
        pages_raw = d.get("pages") or []
        if not isinstance(pages_raw, list):
            raise TypeError("RawGlyphDocument.pages must be a list")
        return RawGlyphDocument(
            source_relpath=(None if d.get("source_relpath") is None else str(d.get("source_relpath"))),
            pages=[RawGlyphPage.from_dict(p) for p in pages_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_relpath": self.source_relpath,
            "pages": [p.to_dict() for p in self.pages],
        }


@dataclass(frozen=True, slots=True)
class SimplifiedGlyph:
    value: str
    is_rtl: bool
    x: float  # baseline origin
    y: float
    width: float
    height: float

    def shifted(self, dx: float) -> "SimplifiedGlyph":
        return replace(self, x=self.x + dx)

    def right(self) -> float:
        return self.x + self.width

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "SimplifiedGlyph":
        return SimplifiedGlyph(
            value=str(d["value"]),
            is_rtl=bool(d.get("is_rtl", False)),
            x=float(d["x"]),
            y=float(d["y"]),
            width=float(d.get("width", 0.0)),
            height=float(d.get("height", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "is_rtl": self.is_rtl,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


# A reconstructed table line, ordered by reading direction.
Row = list[SimplifiedGlyph]
