"""
Canonical stage-boundary models for marks extraction.

Stage code should consume/produce these contract objects (not ad-hoc dicts):
- glyph source -> RawGlyphDocument / RawGlyphPage / RawGlyphItem
- layout       -> SimplifiedGlyph, Row
- marks        -> MarkRecord, MetaInfo, MetaInfoPatch
"""

from .glyphs import (
    DIR_LTR,
    DIR_RTL,
    DIR_TTB,
    RawGlyphDocument,
    RawGlyphItem,
    RawGlyphPage,
    Row,
    SimplifiedGlyph,
)
from .marks import MarkRecord, MetaInfo, MetaInfoPatch

__all__ = [
    "DIR_LTR",
    "DIR_RTL",
    "DIR_TTB",
    "RawGlyphItem",
    "RawGlyphPage",
    "RawGlyphDocument",
    "SimplifiedGlyph",
    "Row",
    "MarkRecord",
    "MetaInfo",
    "MetaInfoPatch",
]
