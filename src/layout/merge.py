from __future__ import annotations

from contracts.glyphs import SimplifiedGlyph

from .config import LayoutConfig


def _gap(a: SimplifiedGlyph, b: SimplifiedGlyph) -> float:
    # Distance between a's trailing edge and b's leading edge in a's reading direction.
    if a.is_rtl:
        return a.x - b.right()
    return b.x - a.right()


def _can_merge(a: SimplifiedGlyph, b: SimplifiedGlyph, config: LayoutConfig) -> bool:
    if a.is_rtl != b.is_rtl:
        return False
    # Blank glyphs separate text chunks downstream; keep them standalone.
    if a.value.strip() == "" or b.value.strip() == "":
        return False
    if abs(a.y - b.y) > config.merge_y_tolerance:
        return False
    return abs(_gap(a, b)) <= config.merge_x_gap


def _merge_pair(a: SimplifiedGlyph, b: SimplifiedGlyph) -> SimplifiedGlyph:
    x0 = min(a.x, b.x)
    x1 = max(a.right(), b.right())
    return SimplifiedGlyph(
        value=a.value + b.value,
        is_rtl=a.is_rtl,
        x=x0,
        y=a.y,
        width=x1 - x0,
        height=max(a.height, b.height),
    )


def merge_close_glyphs(glyphs: list[SimplifiedGlyph], config: LayoutConfig | None = None) -> list[SimplifiedGlyph]:
    """
    Coalesce runs of adjacent, near-touching glyphs into single glyphs.

    Only neighbours in sequence order are merged, text is concatenated in that
    order and the merged box is the union of both boxes, so the total text is
    preserved and glyphs are never reordered.
    """
    config = config or LayoutConfig(merge_items=True)
    config.validate()

    out: list[SimplifiedGlyph] = []
    for g in glyphs:
        if out and _can_merge(out[-1], g, config):
            out[-1] = _merge_pair(out[-1], g)
        else:
            out.append(g)
    return out
