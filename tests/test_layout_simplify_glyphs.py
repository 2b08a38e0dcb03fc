from __future__ import annotations

import unittest

from contracts.glyphs import RawGlyphItem, SimplifiedGlyph
from layout.simplify import (
    DROP_EMPTY_TEXT,
    DROP_SKEWED_TRANSFORM,
    DROP_VERTICAL_TEXT,
    DROP_ZERO_POSITION,
    correct_letter_order,
    filter_and_simplify_glyphs,
    simplify_glyph,
    simplify_glyphs_with_report,
)


def _raw(text: str, x: float, y: float = 700.0, direction: str = "ltr", b: float = 0.0, c: float = 0.0) -> RawGlyphItem:
    return RawGlyphItem(text=text, direction=direction, transform=(10.0, b, c, 10.0, x, y), width=5.0, height=10.0)


def _g(value: str, x: float, is_rtl: bool = True) -> SimplifiedGlyph:
    return SimplifiedGlyph(value=value, is_rtl=is_rtl, x=x, y=700.0, width=5.0, height=10.0)


class TestSimplifyGlyphs(unittest.TestCase):
    def test_basic_field_mapping(self) -> None:
        g = simplify_glyph(_raw("محمد", 120.5, 640.25, direction="rtl"))
        self.assertEqual(g, SimplifiedGlyph(value="محمد", is_rtl=True, x=120.5, y=640.25, width=5.0, height=10.0))
        self.assertFalse(simplify_glyph(_raw("84", 10.0)).is_rtl)

    def test_unusable_glyphs_are_dropped_with_reasons(self) -> None:
        items = [
            _raw("A", 10.0, direction="ttb"),
            _raw("B", 20.0, b=0.5),
            _raw("C", 30.0, c=-0.5),
            _raw("", 40.0),
            _raw("D", 0.0),
            _raw("E", 50.0, y=0.0),
            _raw("F", 60.0),
        ]
        simplified, dropped = simplify_glyphs_with_report(items)

        self.assertEqual([g.value for g in simplified], ["F"])
        self.assertEqual(
            dropped,
            [
                {"index": 0, "reason": DROP_VERTICAL_TEXT},
                {"index": 1, "reason": DROP_SKEWED_TRANSFORM},
                {"index": 2, "reason": DROP_SKEWED_TRANSFORM},
                {"index": 3, "reason": DROP_EMPTY_TEXT},
                {"index": 4, "reason": DROP_ZERO_POSITION},
                {"index": 5, "reason": DROP_ZERO_POSITION},
            ],
        )

    def test_ligatures_split_into_two_letters(self) -> None:
        out = filter_and_simplify_glyphs([_raw("لا", 100.0, direction="rtl"), _raw("لأ", 50.0, direction="rtl")])

        self.assertEqual([g.value for g in out], ["ل", "ا", "ل", "أ"])
        self.assertEqual([g.x for g in out], [100.0, 97.0, 50.0, 47.0])
        self.assertTrue(all(g.is_rtl for g in out))

    def test_diacritics_become_yaa_shifted_left(self) -> None:
        for mark in ("ٌ", "ً", "ٍ"):
            out = filter_and_simplify_glyphs([_raw(mark, 50.0)])
            self.assertEqual(len(out), 1)
            self.assertEqual(out[0].value, "ي")
            self.assertTrue(out[0].is_rtl)
            self.assertEqual(out[0].x, 47.0)

    def test_space_is_flagged_right_to_left(self) -> None:
        out = filter_and_simplify_glyphs([_raw(" ", 30.0, direction="ltr")])
        self.assertEqual(out[0].value, " ")
        self.assertTrue(out[0].is_rtl)

    def test_character_content_is_preserved(self) -> None:
        items = [
            _raw("لا", 100.0, direction="rtl"),
            _raw("م", 90.0, direction="rtl"),
            _raw("12345", 300.0),
            _raw(" ", 80.0),
        ]
        out = filter_and_simplify_glyphs(items)
        self.assertEqual(sorted("".join(g.value for g in out)), sorted("".join(i.text for i in items)))


class TestCorrectLetterOrder(unittest.TestCase):
    def test_close_alef_pair_is_swapped(self) -> None:
        out = correct_letter_order([_g("ا", 100.0), _g("ن", 100.2)])
        self.assertEqual([g.value for g in out], ["ن", "ا"])
        self.assertAlmostEqual(out[0].x, 100.7)
        self.assertEqual(out[1].x, 100.0)

    def test_distant_pair_is_kept(self) -> None:
        glyphs = [_g("ا", 100.0), _g("ن", 101.0)]
        self.assertEqual(correct_letter_order(glyphs), glyphs)

    def test_other_followers_are_kept(self) -> None:
        glyphs = [_g("ا", 100.0), _g("م", 100.1)]
        self.assertEqual(correct_letter_order(glyphs), glyphs)

    def test_swapped_pair_is_not_revisited(self) -> None:
        out = correct_letter_order([_g("ا", 10.0), _g("ن", 10.1), _g("ت", 10.2)])
        self.assertEqual([g.value for g in out], ["ن", "ا", "ت"])
        self.assertEqual(out[2].x, 10.2)

    def test_correction_runs_after_simplification(self) -> None:
        out = filter_and_simplify_glyphs([_raw("ا", 100.0, direction="rtl"), _raw("ب", 100.3, direction="rtl")])
        self.assertEqual([g.value for g in out], ["ب", "ا"])


if __name__ == "__main__":
    unittest.main()
