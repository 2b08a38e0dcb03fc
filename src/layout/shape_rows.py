from __future__ import annotations

from dataclasses import dataclass

from contracts.glyphs import Row, SimplifiedGlyph

from .config import LayoutConfig


@dataclass(frozen=True, slots=True)
class _RowBuilder:
    indices: list[int]  # positions in the input sequence
    y_ref: float  # running mean baseline


def _row_is_rtl(glyphs: list[SimplifiedGlyph]) -> bool:
    # Mixed rows follow the report layout: right-to-left.
    return any(g.is_rtl for g in glyphs)


def _order_within_row(glyphs: list[SimplifiedGlyph], indices: list[int]) -> Row:
    pairs = [(glyphs[i], i) for i in indices]
    if _row_is_rtl([g for g, _ in pairs]):
        # x desc (tie: input order)
        pairs.sort(key=lambda p: (-p[0].x, p[1]))
    else:
        # x asc (tie: input order)
        pairs.sort(key=lambda p: (p[0].x, p[1]))
    return [g for g, _ in pairs]


def group_into_rows(glyphs: list[SimplifiedGlyph], config: LayoutConfig | None = None) -> list[Row]:
    """
    Cluster glyphs into table rows by baseline proximity.

    Page space has its origin at the bottom, so rows are emitted by
    descending baseline (top of page first). Each glyph joins the open row
    whose running baseline is closest, if within `row_y_tolerance`.
    """
    config = config or LayoutConfig()
    config.validate()

    # Deterministic sweep: top to bottom, then x, then input order.
    sweep = sorted(range(len(glyphs)), key=lambda i: (-glyphs[i].y, glyphs[i].x, i))
    builders: list[_RowBuilder] = []

    for i in sweep:
        g = glyphs[i]
        best_b: int | None = None
        best_dy: float | None = None
        for b, rb in enumerate(builders):
            dy = abs(g.y - rb.y_ref)
            if dy > config.row_y_tolerance:
                continue
            if best_dy is None or dy < best_dy:
                best_b = b
                best_dy = dy

        if best_b is None:
            builders.append(_RowBuilder(indices=[i], y_ref=g.y))
        else:
            old = builders[best_b]
            n = len(old.indices)
            builders[best_b] = _RowBuilder(indices=old.indices + [i], y_ref=(old.y_ref * n + g.y) / (n + 1))

    ordered = sorted(builders, key=lambda rb: (-rb.y_ref, min(rb.indices)))
    return [_order_within_row(glyphs, rb.indices) for rb in ordered if rb.indices]
