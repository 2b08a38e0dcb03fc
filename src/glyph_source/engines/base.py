from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from contracts.glyphs import RawGlyphItem


class GlyphSourceEngine(ABC):
    """
    Glyph source abstraction (the document-parsing collaborator).

    Engines must:
    - Return one glyph per text run the backend reports (no filtering)
    - Use 1-indexed page numbers
    - Let backend failures propagate; callers treat them as fatal for the document
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def get_page_count(self, *, pdf_file: Path) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_page_glyphs(self, *, pdf_file: Path, page_num: int) -> list[RawGlyphItem]:
        raise NotImplementedError

    def close(self) -> None:
        """
        Release anything held open across calls. Safe to call more than once.
        """
        return None
