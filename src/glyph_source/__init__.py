"""
Glyph source - the document-parsing collaborator.

This package is intentionally limited to reading positioned glyphs:
- It yields raw glyph records (text, direction, transform, width, height) per page.
- It performs NO filtering, simplification, row shaping, or field extraction.
- It is the ONLY place allowed to open PDFs.
"""

from .data_access import DataAccessError, resolve_under_data_root, sha256_file
from .engines import GlyphSourceEngine, JsonGlyphEngine, Pypdfium2GlyphEngine

__all__ = [
    "DataAccessError",
    "GlyphSourceEngine",
    "JsonGlyphEngine",
    "Pypdfium2GlyphEngine",
    "resolve_under_data_root",
    "sha256_file",
]
