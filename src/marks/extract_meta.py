from __future__ import annotations

from typing import Iterable

from contracts.glyphs import Row
from contracts.marks import MetaInfo, MetaInfoPatch

from .meta_patterns import match_semester, match_students, match_subject, match_year


def scan_row_meta(row: Row) -> MetaInfoPatch:
    """
    Metadata found in one row. Every row is scanned, whether or not it also
    yields a mark record.
    """
    values = [g.value for g in row]
    dotted = ".".join(values)
    raw = "".join(values)
    return MetaInfoPatch(
        semester=match_semester(dotted),
        year=match_year(raw),
        subject=match_subject(dotted),
        students=match_students(dotted, raw),
    )


def scan_rows_meta(rows: Iterable[Row]) -> MetaInfoPatch:
    """Row patches combined in row order; later matches overwrite earlier ones."""
    patch = MetaInfoPatch()
    for row in rows:
        patch = patch.then(scan_row_meta(row))
    return patch


def extract_meta_info(row: Row, info: MetaInfo) -> MetaInfo:
    return info.apply(scan_row_meta(row))
