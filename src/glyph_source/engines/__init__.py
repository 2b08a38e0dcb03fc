from .base import GlyphSourceEngine
from .json_engine import JsonGlyphEngine
from .pypdfium2_engine import Pypdfium2GlyphEngine

__all__ = ["GlyphSourceEngine", "JsonGlyphEngine", "Pypdfium2GlyphEngine"]
