from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from contracts.glyphs import DIR_RTL, DIR_TTB, RawGlyphItem, SimplifiedGlyph

# Two-letter ligatures emitted as a single glyph: ligature -> (first, second).
_LIGATURES: dict[str, tuple[str, str]] = {
    "لا": ("ل", "ا"),
    "لأ": ("ل", "أ"),
}
LIGATURE_SHIFT = 3.0

# Tanween marks the renderer collapses onto a following yaa.
_DIACRITICS = frozenset({"ٌ", "ً", "ٍ"})  # dammatan, fathatan, kasratan
_DIACRITIC_BASE = "ي"
DIACRITIC_SHIFT = 3.0

# alef followed by one of these letters is sometimes emitted out of reading order.
_SWAP_BASE = "ا"
_SWAP_FOLLOWERS = frozenset({"ي", "ن", "ت", "ث", "ئ", "ب"})
SWAP_MAX_DX = 0.5
SWAP_SHIFT = 0.5

DROP_VERTICAL_TEXT = "VERTICAL_TEXT"
DROP_SKEWED_TRANSFORM = "SKEWED_TRANSFORM"
DROP_EMPTY_TEXT = "EMPTY_TEXT"
DROP_ZERO_POSITION = "ZERO_POSITION"


def simplify_glyph(item: RawGlyphItem) -> SimplifiedGlyph:
    """Basic 1:1 field mapping."""
    return SimplifiedGlyph(
        value=item.text,
        is_rtl=item.direction == DIR_RTL,
        x=item.transform[4],
        y=item.transform[5],
        width=item.width,
        height=item.height,
    )


def drop_reason(item: RawGlyphItem) -> str | None:
    """Why a raw glyph is not usable table content, or None if it is."""
    if item.direction == DIR_TTB:
        return DROP_VERTICAL_TEXT
    if item.transform[1] != 0 or item.transform[2] != 0:
        return DROP_SKEWED_TRANSFORM
    if item.text == "":
        return DROP_EMPTY_TEXT
    # Placeholder/invisible glyphs sit exactly on an axis.
    if item.transform[4] == 0 or item.transform[5] == 0:
        return DROP_ZERO_POSITION
    return None


def _expand(item: RawGlyphItem) -> list[SimplifiedGlyph]:
    base = simplify_glyph(item)

    pair = _LIGATURES.get(item.text)
    if pair is not None:
        first, second = pair
        return [
            replace(base, value=first),
            replace(base, value=second, x=base.x - LIGATURE_SHIFT),
        ]

    if item.text in _DIACRITICS:
        return [replace(base, value=_DIACRITIC_BASE, is_rtl=True, x=base.x - DIACRITIC_SHIFT)]

    # A lone space must never look like a numeral cell.
    if item.text == " ":
        return [replace(base, is_rtl=True)]

    return [base]


def correct_letter_order(glyphs: list[SimplifiedGlyph]) -> list[SimplifiedGlyph]:
    """
    Swap adjacent (alef, follower) pairs whose x positions nearly coincide.
    The moved follower is nudged right by SWAP_SHIFT; a swapped pair is not revisited.
    """
    out = list(glyphs)
    i = 0
    while i < len(out) - 1:
        curr = out[i]
        nxt = out[i + 1]
        if curr.value == _SWAP_BASE and nxt.value in _SWAP_FOLLOWERS and abs(curr.x - nxt.x) < SWAP_MAX_DX:
            out[i] = nxt.shifted(SWAP_SHIFT)
            out[i + 1] = curr
            i += 2
            continue
        i += 1
    return out


def simplify_glyphs_with_report(
    items: Iterable[RawGlyphItem],
) -> tuple[list[SimplifiedGlyph], list[dict[str, Any]]]:
    """
    Filter and simplify raw glyphs, also returning the dropped glyphs as
    [{"index": <input index>, "reason": <DROP_*>}] in input order.
    """
    simplified: list[SimplifiedGlyph] = []
    dropped: list[dict[str, Any]] = []
    for idx, item in enumerate(items):
        reason = drop_reason(item)
        if reason is not None:
            dropped.append({"index": idx, "reason": reason})
            continue
        simplified.extend(_expand(item))
    return correct_letter_order(simplified), dropped


def filter_and_simplify_glyphs(items: Iterable[RawGlyphItem]) -> list[SimplifiedGlyph]:
    simplified, _dropped = simplify_glyphs_with_report(items)
    return simplified
