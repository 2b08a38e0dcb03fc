from __future__ import annotations

import unittest

from contracts.glyphs import SimplifiedGlyph
from marks.extract_records import (
    ResolvedStudentId,
    extract_marks_from_rows,
    extract_record_from_row,
    resolve_student_id,
    to_western_digits,
)


def _n(value: str, x: float) -> SimplifiedGlyph:
    return SimplifiedGlyph(value=value, is_rtl=False, x=x, y=700.0, width=4.0, height=10.0)


def _t(value: str, x: float) -> SimplifiedGlyph:
    return SimplifiedGlyph(value=value, is_rtl=True, x=x, y=700.0, width=4.0, height=10.0)


class TestResolveStudentId(unittest.TestCase):
    def test_direct_identifier(self) -> None:
        self.assertEqual(resolve_student_id([_n("12345", 500.0)]), ResolvedStudentId(student_id=12345, consumed=1))

    def test_eastern_digits_are_normalized(self) -> None:
        self.assertEqual(to_western_digits("٥٤٣٢١"), "54321")
        self.assertEqual(resolve_student_id([_n("٥٤٣٢١", 500.0)]), ResolvedStudentId(student_id=54321, consumed=1))

    def test_right_to_left_first_cell_is_rejected(self) -> None:
        self.assertIsNone(resolve_student_id([_t("12345", 500.0)]))
        self.assertIsNone(resolve_student_id([]))

    def test_out_of_range_identifiers_are_rejected(self) -> None:
        for value in ("62345", "02345", "1234", "123456", "1234a"):
            self.assertIsNone(resolve_student_id([_n(value, 500.0), _t("محمد", 450.0)]), value)

    def test_digit_cells_are_reconstructed_high_to_low(self) -> None:
        row = [_n("5", 500.0), _n("4", 490.0), _n("3", 480.0), _n("2", 470.0), _n("1", 460.0), _t("محمد", 400.0)]
        self.assertEqual(resolve_student_id(row), ResolvedStudentId(student_id=12345, consumed=5))

    def test_reconstruction_accepts_eastern_digits(self) -> None:
        row = [_n("٥", 500.0), _n("٤", 490.0), _n("٣", 480.0), _n("٢", 470.0), _n("١", 460.0)]
        self.assertEqual(resolve_student_id(row), ResolvedStudentId(student_id=12345, consumed=5))

    def test_reconstruction_needs_five_digit_cells(self) -> None:
        self.assertIsNone(resolve_student_id([_n("5", 500.0), _n("4", 490.0), _n("3", 480.0), _n("2", 470.0)]))
        row = [_n("5", 500.0), _n("4", 490.0), _t("س", 480.0), _n("2", 470.0), _n("1", 460.0)]
        self.assertIsNone(resolve_student_id(row))
        row = [_n("5", 500.0), _n("4", 490.0), _n("3", 480.0), _n("2", 470.0), _n("17", 460.0)]
        self.assertIsNone(resolve_student_id(row))

    def test_reconstructed_identifier_must_be_valid(self) -> None:
        row = [_n("1", 500.0), _n("2", 490.0), _n("3", 480.0), _n("4", 470.0), _n("7", 460.0)]
        self.assertIsNone(resolve_student_id(row))


class TestExtractRecordFromRow(unittest.TestCase):
    def test_full_row(self) -> None:
        row = [
            _n("12345", 500.0),
            _t("محمد", 450.0),
            _t("علي", 445.0),
            _n("84", 300.0),
            _n("90", 250.0),
            _n("77", 200.0),
        ]
        record = extract_record_from_row(row)
        assert record is not None
        self.assertEqual(record.student_id, 12345)
        self.assertEqual(record.extracted_strings, ["محمد علي"])
        self.assertEqual((record.practical_mark, record.theoretical_mark, record.exam_mark), (84, 90, 77))

    def test_digit_cells_example_row(self) -> None:
        row = [_n("1", 500.0), _n("2", 490.0), _n("3", 480.0), _n("4", 470.0), _n("5", 460.0),
               _n("84", 300.0), _n("90", 250.0), _n("77", 200.0)]
        record = extract_record_from_row(row)
        assert record is not None
        self.assertEqual(record.student_id, 54321)
        self.assertEqual((record.practical_mark, record.theoretical_mark, record.exam_mark), (84, 90, 77))
        self.assertIsNone(record.extracted_strings)

    def test_reconstructed_digit_cells_are_not_marks(self) -> None:
        row = [_n("5", 500.0), _n("4", 490.0), _n("3", 480.0), _n("2", 470.0), _n("1", 460.0), _n("66", 300.0)]
        record = extract_record_from_row(row)
        assert record is not None
        self.assertEqual(record.student_id, 12345)
        self.assertEqual((record.practical_mark, record.theoretical_mark, record.exam_mark), (None, None, 66))

    def test_large_gap_starts_a_new_chunk(self) -> None:
        row = [_n("12345", 500.0), _t("محمد", 450.0), _t("علي", 430.0), _t("حسن", 425.0)]
        record = extract_record_from_row(row)
        assert record is not None
        self.assertEqual(record.extracted_strings, ["محمد", "علي حسن"])

    def test_blank_glyph_starts_a_new_chunk(self) -> None:
        row = [_n("12345", 500.0), _t("محمد", 450.0), _t(" ", 447.0), _t("علي", 444.0)]
        record = extract_record_from_row(row)
        assert record is not None
        self.assertEqual(record.extracted_strings, ["محمد", "علي"])

    def test_text_after_first_mark_is_ignored(self) -> None:
        row = [_n("12345", 500.0), _n("84", 450.0), _t("راسب", 400.0)]
        record = extract_record_from_row(row)
        assert record is not None
        self.assertIsNone(record.extracted_strings)
        self.assertEqual(record.exam_mark, 84)

    def test_marks_assignment(self) -> None:
        cases = [
            ([], (None, None, None)),
            (["40"], (None, None, 40)),
            (["40", "55"], (None, None, 55)),
            (["40", "55", "7"], (40, 55, 7)),
            (["1", "2", "3", "4"], (None, None, 4)),
        ]
        for marks, expected in cases:
            row = [_n("23456", 500.0)] + [_n(m, 300.0 - 10 * i) for i, m in enumerate(marks)]
            record = extract_record_from_row(row)
            assert record is not None
            self.assertEqual((record.practical_mark, record.theoretical_mark, record.exam_mark), expected, marks)

    def test_non_mark_cells_are_skipped(self) -> None:
        row = [
            _n("12345", 500.0),
            _n("1000", 300.0),  # too many digits
            _n("٨٤", 290.0),  # eastern digits are not marks
            _t("90", 280.0),  # right-to-left cell
            _n("9.5", 270.0),
            _n("60", 260.0),
        ]
        record = extract_record_from_row(row)
        assert record is not None
        self.assertEqual((record.practical_mark, record.theoretical_mark, record.exam_mark), (None, None, 60))

    def test_rejected_rows_yield_nothing(self) -> None:
        self.assertIsNone(extract_record_from_row([_t("الاسم", 500.0), _n("12345", 400.0)]))
        self.assertIsNone(extract_record_from_row([_n("999", 500.0)]))


class TestExtractMarksFromRows(unittest.TestCase):
    def test_records_in_row_order_and_meta_from_rejected_rows(self) -> None:
        rows = [
            [_t("فصل", 400.0), _t("اول", 390.0)],
            [_n("23456", 500.0), _n("70", 300.0)],
            [_n("12345", 500.0), _n("50", 300.0)],
        ]
        records, patch = extract_marks_from_rows(rows)
        self.assertEqual([r.student_id for r in records], [23456, 12345])
        self.assertEqual(patch.semester, "1")

    def test_every_record_has_a_valid_identifier(self) -> None:
        rows = [[_n(str(v), 500.0)] for v in (9999, 10000, 35000, 59999, 60000, 123456)]
        records, _ = extract_marks_from_rows(rows)
        self.assertEqual([r.student_id for r in records], [10000, 35000, 59999])
        for r in records:
            self.assertTrue(10000 <= r.student_id <= 59999)
            self.assertTrue(1 <= r.student_id // 10000 <= 5)


if __name__ == "__main__":
    unittest.main()
