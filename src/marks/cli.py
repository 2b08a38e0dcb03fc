from __future__ import annotations

import argparse
import json
from pathlib import Path

from layout.config import LayoutConfig

from .artifacts import write_marks_result_json
from .contracts import ExtractMarksConfig, GlyphEngineName
from .module import run_extract_marks_relpath


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="marks-extract",
        description="Extract student mark records and page metadata from a marks report.",
    )
    p.add_argument("--data-root", required=True, type=Path, help="Resolved DATA_ROOT path.")
    p.add_argument(
        "--source-relpath",
        required=True,
        help="Input relative to --data-root (a PDF, or a glyph dump with --engine glyph_json).",
    )
    p.add_argument("--out-json", required=True, type=Path, help="Output result JSON file.")
    p.add_argument(
        "--engine",
        choices=[e.value for e in GlyphEngineName],
        default=GlyphEngineName.PYPDFIUM2.value,
        help="Glyph source backend.",
    )
    p.add_argument(
        "--page-selection",
        default=None,
        help='Optional page selection like "1,3-5". Default: all pages.',
    )
    p.add_argument("--merge-items", action="store_true", help="Merge adjacent glyph fragments before row shaping.")
    p.add_argument("--row-y-tolerance", type=float, default=1.0)
    p.add_argument("--merge-x-gap", type=float, default=1.0)
    p.add_argument("--merge-y-tolerance", type=float, default=0.5)
    p.add_argument(
        "--compute-source-sha256",
        action="store_true",
        help="Include SHA-256 of the source document in meta for auditing.",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    config = ExtractMarksConfig(
        data_root=args.data_root,
        engine=GlyphEngineName(args.engine),
        layout=LayoutConfig(
            merge_items=args.merge_items,
            merge_x_gap=args.merge_x_gap,
            merge_y_tolerance=args.merge_y_tolerance,
            row_y_tolerance=args.row_y_tolerance,
        ),
        page_selection=args.page_selection,
        compute_source_sha256=args.compute_source_sha256,
    )

    result = run_extract_marks_relpath(config=config, source_relpath=args.source_relpath)
    write_marks_result_json(result=result, out_json=args.out_json)

    summary = {
        "ok": result.ok,
        "pages": len(result.pages),
        "records": len(result.records),
        "semester": result.meta_info.semester,
        "year": result.meta_info.year,
    }
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
