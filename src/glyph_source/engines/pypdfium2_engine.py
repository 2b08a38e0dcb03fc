from __future__ import annotations

import ctypes
import math
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from contracts.glyphs import DIR_LTR, DIR_RTL, RawGlyphItem

from .base import GlyphSourceEngine

_STRONG_RTL = frozenset({"R", "AL"})

# Consecutive characters stay in one run while their baselines agree within
# this many page units and the box gap stays below this share of the font size.
RUN_BASELINE_TOLERANCE = 0.5
RUN_GAP_EM = 0.6


@dataclass(frozen=True, slots=True)
class PdfChar:
    """
    One character of a pdfium text page.

    `origin_x`, `origin_y` are the baseline origin; `box` is the tight char box
    (left, bottom, right, top).
    """

    text: str
    origin_x: float
    origin_y: float
    box: tuple[float, float, float, float]
    font_size: float
    angle: float
    generated: bool = False


def glyph_direction(text: str) -> str:
    """
    "rtl" when the text carries a strong right-to-left character, else "ltr".
    Arabic-Indic digits are weak (AN), so digit runs stay "ltr".
    """
    for ch in text:
        if unicodedata.bidirectional(ch) in _STRONG_RTL:
            return DIR_RTL
    return DIR_LTR


def glyph_transform(*, font_size: float, angle: float, x: float, y: float) -> tuple[float, float, float, float, float, float]:
    if angle == 0.0:
        return (font_size, 0.0, 0.0, font_size, x, y)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (font_size * cos_a, font_size * sin_a, -font_size * sin_a, font_size * cos_a, x, y)


def _continues_run(prev: PdfChar, cur: PdfChar) -> bool:
    if abs(cur.font_size - prev.font_size) > 1e-6 or abs(cur.angle - prev.angle) > 1e-6:
        return False
    if abs(cur.origin_y - prev.origin_y) > RUN_BASELINE_TOLERANCE:
        return False
    gap = max(cur.box[0] - prev.box[2], prev.box[0] - cur.box[2])
    return gap <= RUN_GAP_EM * max(prev.font_size, 1.0)


def group_char_runs(chars: list[PdfChar]) -> list[list[PdfChar]]:
    """
    Split the text page's character stream into text runs.

    pdfium inserts generated spaces and line breaks between separate text
    objects; those always end a run and are never part of one.
    """
    runs: list[list[PdfChar]] = []
    current: list[PdfChar] = []
    for ch in chars:
        if ch.generated or ch.text == "":
            if current:
                runs.append(current)
            current = []
            continue
        if current and not _continues_run(current[-1], ch):
            runs.append(current)
            current = []
        current.append(ch)
    if current:
        runs.append(current)
    return runs


def run_to_glyph(run: list[PdfChar]) -> RawGlyphItem:
    """
    Collapse a run into one glyph anchored at its leftmost baseline origin.

    Right-to-left runs are read by descending x so the text comes out in
    reading order whatever order the content stream drew it in.
    """
    direction = glyph_direction("".join(c.text for c in run))
    ordered = sorted(run, key=lambda c: c.origin_x, reverse=direction == DIR_RTL)
    first = run[0]
    left = min(c.box[0] for c in run)
    bottom = min(c.box[1] for c in run)
    right = max(c.box[2] for c in run)
    top = max(c.box[3] for c in run)
    return RawGlyphItem(
        text="".join(c.text for c in ordered),
        direction=direction,
        transform=glyph_transform(
            font_size=first.font_size,
            angle=first.angle,
            x=min(c.origin_x for c in run),
            y=first.origin_y,
        ),
        width=right - left,
        height=top - bottom,
    )


def _read_textpage_chars(textpage: Any, pdfium_c: Any) -> list[PdfChar]:
    chars: list[PdfChar] = []
    ox = ctypes.c_double()
    oy = ctypes.c_double()
    for i in range(textpage.count_chars()):
        if pdfium_c.FPDFText_IsGenerated(textpage.raw, i) == 1:
            chars.append(PdfChar(text="", origin_x=0.0, origin_y=0.0, box=(0.0, 0.0, 0.0, 0.0), font_size=0.0, angle=0.0, generated=True))
            continue

        left, bottom, right, top = textpage.get_charbox(i)
        if pdfium_c.FPDFText_GetCharOrigin(textpage.raw, i, ctypes.byref(ox), ctypes.byref(oy)):
            origin = (float(ox.value), float(oy.value))
        else:
            origin = (float(left), float(bottom))
        angle = float(pdfium_c.FPDFText_GetCharAngle(textpage.raw, i))
        if angle < 0:
            angle = 0.0  # pdfium reports -1 on failure

        chars.append(
            PdfChar(
                text=textpage.get_text_range(index=i, count=1),
                origin_x=origin[0],
                origin_y=origin[1],
                box=(float(left), float(bottom), float(right), float(top)),
                font_size=float(pdfium_c.FPDFText_GetFontSize(textpage.raw, i)),
                angle=angle,
            )
        )
    return chars


class Pypdfium2GlyphEngine(GlyphSourceEngine):
    """
    Emits one glyph per text run. Open documents are kept per path until close().
    """

    def __init__(self) -> None:
        self._documents: dict[Path, Any] = {}

    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except ImportError:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore
            import pypdfium2.raw as pdfium_c  # type: ignore

            return pdfium, pdfium_c
        except ImportError as e:
            raise RuntimeError(
                "Missing dependency: pypdfium2 is required to read glyphs from PDFs."
            ) from e

    def _open(self, pdf_file: Path) -> Any:
        pdfium, _ = self._require_pdfium()
        key = pdf_file.resolve()
        if key not in self._documents:
            self._documents[key] = pdfium.PdfDocument(str(key))
        return self._documents[key]

    def close(self) -> None:
        for doc in self._documents.values():
            doc.close()
        self._documents.clear()

    def get_page_count(self, *, pdf_file: Path) -> int:
        return len(self._open(pdf_file))

    def get_page_glyphs(self, *, pdf_file: Path, page_num: int) -> list[RawGlyphItem]:
        _, pdfium_c = self._require_pdfium()
        doc = self._open(pdf_file)
        page_count = len(doc)
        if page_num < 1 or page_num > page_count:
            raise ValueError(f"Page out of range: {page_num} (1..{page_count})")

        page = doc[page_num - 1]
        textpage = page.get_textpage()
        try:
            chars = _read_textpage_chars(textpage, pdfium_c)
        finally:
            textpage.close()
            page.close()
        return [run_to_glyph(run) for run in group_char_runs(chars)]
