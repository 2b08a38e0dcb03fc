from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from contracts.glyphs import RawGlyphDocument, RawGlyphItem, RawGlyphPage
from layout.debug_print import main


def _glyph(text: str, x: float, y: float, direction: str) -> RawGlyphItem:
    return RawGlyphItem(text=text, direction=direction, transform=(10.0, 0.0, 0.0, 10.0, x, y), width=4.0, height=10.0)


class TestLayoutDebugPrint(unittest.TestCase):
    def test_prints_rows_in_page_order(self) -> None:
        doc = RawGlyphDocument(
            source_relpath=None,
            pages=[
                RawGlyphPage(
                    page_num=1,
                    glyphs=[
                        _glyph("84", 300.0, 700.0, "ltr"),
                        _glyph("12345", 500.0, 700.0, "ltr"),
                        _glyph("محمد", 450.0, 700.0, "rtl"),
                        _glyph("الفصل", 400.0, 760.0, "rtl"),
                    ],
                )
            ],
        )
        with tempfile.TemporaryDirectory() as tmp:
            dump = Path(tmp) / "glyphs.json"
            dump.write_text(json.dumps(doc.to_dict(), ensure_ascii=False), encoding="utf-8")

            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                rc = main(["--glyphs-json", str(dump)])

        self.assertEqual(rc, 0)
        out = buf.getvalue()
        self.assertIn("=== PAGE 001 ===", out)
        self.assertIn("rows=2", out)
        self.assertIn("r0000 y=760.00 :: الفصل", out)
        self.assertIn("r0001 y=700.00 :: 12345 | محمد | 84", out)


if __name__ == "__main__":
    unittest.main()
