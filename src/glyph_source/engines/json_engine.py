from __future__ import annotations

import json
from pathlib import Path

from contracts.glyphs import RawGlyphDocument, RawGlyphItem

from .base import GlyphSourceEngine


def load_glyph_document(path: Path) -> RawGlyphDocument:
    return RawGlyphDocument.from_dict(json.loads(path.read_text(encoding="utf-8")))


class JsonGlyphEngine(GlyphSourceEngine):
    """
    Reads a pre-extracted glyph dump (RawGlyphDocument JSON) instead of a PDF.
    `pdf_file` is the path of the dump itself.
    """

    def __init__(self) -> None:
        self._cache: dict[Path, RawGlyphDocument] = {}

    def backend_id(self) -> str:
        return "glyph_json"

    def close(self) -> None:
        self._cache.clear()

    def _load(self, path: Path) -> RawGlyphDocument:
        key = path.resolve()
        if key not in self._cache:
            self._cache[key] = load_glyph_document(key)
        return self._cache[key]

    def get_page_count(self, *, pdf_file: Path) -> int:
        doc = self._load(pdf_file)
        return max((p.page_num for p in doc.pages), default=0)

    def get_page_glyphs(self, *, pdf_file: Path, page_num: int) -> list[RawGlyphItem]:
        doc = self._load(pdf_file)
        for p in doc.pages:
            if p.page_num == page_num:
                return list(p.glyphs)
        page_count = self.get_page_count(pdf_file=pdf_file)
        if page_num < 1 or page_num > page_count:
            raise ValueError(f"Page out of range: {page_num} (1..{page_count})")
        # Pages absent from a dump carry no glyphs.
        return []
