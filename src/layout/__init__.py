"""
Layout reconstruction: raw glyphs -> simplified glyphs -> table rows.

- simplify: filtering, ligature/diacritic handling, letter-order correction
- merge: optional coalescing of adjacent fragments (off by default)
- shape_rows: vertical clustering and script-aware ordering within rows

No field interpretation happens here.
"""

from .config import LayoutConfig
from .merge import merge_close_glyphs
from .shape_rows import group_into_rows
from .simplify import correct_letter_order, filter_and_simplify_glyphs, simplify_glyph

__all__ = [
    "LayoutConfig",
    "correct_letter_order",
    "filter_and_simplify_glyphs",
    "group_into_rows",
    "merge_close_glyphs",
    "simplify_glyph",
]
