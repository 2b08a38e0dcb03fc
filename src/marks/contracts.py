from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from contracts.marks import MarkRecord, MetaInfo, MetaInfoPatch
from layout.config import LayoutConfig


class GlyphEngineName(str, Enum):
    """
    Glyph source backend identifiers.
    """

    PYPDFIUM2 = "pypdfium2"
    GLYPH_JSON = "glyph_json"


@dataclass(frozen=True, slots=True)
class ExtractMarksError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class PageMarksResult:
    page_num: int  # 1-indexed
    records: list[MarkRecord]
    meta_patch: MetaInfoPatch
    counts: dict[str, int]
    dropped_glyphs: list[dict[str, Any]]

    def to_dict(self, *, include_records: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {
            "page_num": self.page_num,
            "meta_patch": self.meta_patch.to_dict(),
            "counts": dict(self.counts),
            "dropped_glyphs": [dict(d) for d in self.dropped_glyphs],
        }
        if include_records:
            out["records"] = [r.to_dict() for r in self.records]
        return out


@dataclass(frozen=True, slots=True)
class DocumentMarksResult:
    # Deterministic identifier, stable for identical:
    # (source_relpath + engine + merge flag + page selection)
    doc_id: str
    ok: bool
    engine: GlyphEngineName
    source_relpath: str
    records: list[MarkRecord]
    meta_info: MetaInfo
    pages: list[PageMarksResult]
    errors: list[ExtractMarksError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "doc_id": self.doc_id,
            "ok": self.ok,
            "engine": self.engine.value,
            "source_relpath": self.source_relpath,
            "records": [r.to_dict() for r in self.records],
            "meta_info": self.meta_info.to_dict(),
            "pages": [p.to_dict(include_records=False) for p in self.pages],
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }


@dataclass(frozen=True, slots=True)
class ExtractMarksConfig:
    """
    Document-level extraction configuration.

    - `data_root` must be passed explicitly
    - no environment variable reads in this module
    """

    data_root: Path
    engine: GlyphEngineName = GlyphEngineName.PYPDFIUM2
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    page_selection: str | None = None  # e.g. "1,3-5"; None => all pages
    default_year: str = "2018/2019"
    compute_source_sha256: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.data_root, Path):
            raise TypeError("data_root must be pathlib.Path")
        self.layout.validate()
