"""
Field extraction: table rows -> mark records + page metadata.

- extract_records: per-row identifier resolution, text chunks and marks
- extract_meta: per-row semester/year/subject/student-count scan
- module: page and document drivers folding metadata in page order

Rows that do not look like data rows are dropped silently.
"""

from .contracts import (
    DocumentMarksResult,
    ExtractMarksConfig,
    ExtractMarksError,
    GlyphEngineName,
    PageMarksResult,
)
from .extract_meta import extract_meta_info, scan_row_meta
from .extract_records import extract_marks_from_rows, extract_record_from_row, resolve_student_id
from .module import (
    extract_marks_from_glyph_document,
    extract_marks_from_page,
    fold_meta_patches,
    run_extract_marks_relpath,
)

__all__ = [
    "DocumentMarksResult",
    "ExtractMarksConfig",
    "ExtractMarksError",
    "GlyphEngineName",
    "PageMarksResult",
    "extract_marks_from_glyph_document",
    "extract_marks_from_page",
    "extract_marks_from_rows",
    "extract_meta_info",
    "extract_record_from_row",
    "fold_meta_patches",
    "resolve_student_id",
    "run_extract_marks_relpath",
    "scan_row_meta",
]
