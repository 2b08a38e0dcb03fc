from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from contracts.glyphs import RawGlyphDocument, Row

from .config import LayoutConfig
from .merge import merge_close_glyphs
from .shape_rows import group_into_rows
from .simplify import simplify_glyphs_with_report


def _load_json(p: Path) -> dict[str, Any]:
    return json.loads(p.read_text(encoding="utf-8"))


def _row_str(row: Row) -> str:
    return " | ".join(g.value for g in row)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="layout-debug-print")
    ap.add_argument("--glyphs-json", required=True, type=Path, help="Glyph dump (RawGlyphDocument JSON).")
    ap.add_argument("--merge-items", action="store_true")
    ap.add_argument("--row-y-tolerance", type=float, default=1.0)
    ap.add_argument("--max-rows", type=int, default=0, help="If >0, truncate after N rows per page.")
    args = ap.parse_args(argv)

    doc = RawGlyphDocument.from_dict(_load_json(args.glyphs_json))
    cfg = LayoutConfig(merge_items=args.merge_items, row_y_tolerance=args.row_y_tolerance)
    cfg.validate()

    for page in sorted(doc.pages, key=lambda p: p.page_num):
        simplified, dropped = simplify_glyphs_with_report(page.glyphs)
        glyphs = merge_close_glyphs(simplified, cfg) if cfg.merge_items else simplified
        rows = group_into_rows(glyphs, cfg)

        print(f"\n=== PAGE {page.page_num:03d} ===")
        print(f"glyphs_in={len(page.glyphs)} simplified={len(simplified)} dropped={len(dropped)} rows={len(rows)}")

        print("\n-- ROWS (page order) --")
        for i, row in enumerate(rows):
            if args.max_rows and i >= args.max_rows:
                print(f"... (truncated at {args.max_rows})")
                break
            print(f"r{i:04d} y={row[0].y:.2f} :: {_row_str(row)}")
            for g in row:
                flag = "rtl" if g.is_rtl else "ltr"
                print(f"  - x={g.x:>8.2f} {flag} value={g.value!r}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
