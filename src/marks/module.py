from __future__ import annotations

import hashlib
import json
import re
from pathlib import Path
from typing import Any, Iterable, Iterator

from contracts.glyphs import RawGlyphDocument, RawGlyphItem, RawGlyphPage
from contracts.marks import MarkRecord, MetaInfo
from glyph_source import DataAccessError, GlyphSourceEngine, JsonGlyphEngine, Pypdfium2GlyphEngine
from glyph_source import resolve_under_data_root, sha256_file
from layout.config import LayoutConfig
from layout.merge import merge_close_glyphs
from layout.shape_rows import group_into_rows
from layout.simplify import simplify_glyphs_with_report

from .contracts import (
    DocumentMarksResult,
    ExtractMarksConfig,
    ExtractMarksError,
    GlyphEngineName,
    PageMarksResult,
)
from .extract_records import extract_marks_from_rows

_EXTRACTION_VERSION = "marks_v1"

# Applied when a page emits records and no semester was matched so far.
DEFAULT_SEMESTER = "3"

_EXPECTED_SUFFIX = {
    GlyphEngineName.PYPDFIUM2: ".pdf",
    GlyphEngineName.GLYPH_JSON: ".json",
}


def _safe_stem(relpath: str) -> str:
    """
    Deterministic, filesystem-safe stem for readability.
    """
    s = relpath.replace("\\", "/").split("/")[-1]
    s = re.sub(r"\.(pdf|json)$", "", s, flags=re.IGNORECASE)
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "doc"


def _canonical_page_selection(selection: str | None) -> str:
    """
    Deterministic canonicalization for hashing/audit (does NOT validate semantics).
    """
    if selection is None:
        return "all"
    s = "".join(selection.split())
    return s if s != "" else "all"


def _compute_doc_id(
    *,
    source_relpath: str,
    backend_id: str,
    merge_items: bool,
    page_selection: str | None,
) -> str:
    payload = {
        "source_relpath": source_relpath.replace("\\", "/"),
        "backend": backend_id,
        "merge_items": merge_items,
        "page_selection": _canonical_page_selection(page_selection),
    }
    s = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(s.encode("utf-8")).hexdigest()
    return f"{_safe_stem(source_relpath)}_{digest[:12]}"


def parse_page_selection(selection: str | None, *, page_count: int) -> list[int]:
    """
    Parse "1,3-5" into a sorted list of unique 1-indexed page numbers.
    None => all pages.
    """

    if selection is None or selection.strip() == "":
        return list(range(1, page_count + 1))

    pages: set[int] = set()
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            a_str, b_str = part.split("-", 1)
            a = int(a_str.strip())
            b = int(b_str.strip())
            if a <= 0 or b <= 0:
                raise ValueError("page numbers must be >= 1")
            if b < a:
                raise ValueError(f"invalid range: {part!r}")
            pages.update(range(a, b + 1))
        else:
            p = int(part)
            if p <= 0:
                raise ValueError("page numbers must be >= 1")
            pages.add(p)

    ordered = sorted(pages)
    if ordered and ordered[-1] > page_count:
        raise ValueError(f"page selection out of bounds (1..{page_count})")
    return ordered


def _get_engine(engine: GlyphEngineName) -> GlyphSourceEngine:
    if engine == GlyphEngineName.PYPDFIUM2:
        return Pypdfium2GlyphEngine()
    if engine == GlyphEngineName.GLYPH_JSON:
        return JsonGlyphEngine()
    raise ValueError(f"Unsupported glyph engine: {engine}")


def extract_marks_from_page(
    glyphs: list[RawGlyphItem],
    config: LayoutConfig | None = None,
    *,
    page_num: int = 1,
) -> PageMarksResult:
    """
    Simplify -> (optional) merge -> shape rows -> extract fields, for one page.
    """
    config = config or LayoutConfig()
    config.validate()

    simplified, dropped = simplify_glyphs_with_report(glyphs)
    merged = merge_close_glyphs(simplified, config) if config.merge_items else list(simplified)
    rows = group_into_rows(merged, config)
    records, patch = extract_marks_from_rows(rows)

    return PageMarksResult(
        page_num=page_num,
        records=records,
        meta_patch=patch,
        counts={
            "glyphs_in": len(glyphs),
            "glyphs_simplified": len(simplified),
            "glyphs_merged": len(merged),
            "rows": len(rows),
            "records": len(records),
        },
        dropped_glyphs=sorted(dropped, key=lambda d: (int(d["index"]), str(d["reason"]))),
    )


def fold_meta_patches(pages: Iterable[PageMarksResult], *, default_year: str | None) -> MetaInfo:
    """
    Fold page patches in page order (last-non-null-wins).

    The semester default is applied per page, right after a page that emitted
    records; a later page may still overwrite it. The year default is applied
    once, after the last page.
    """
    info = MetaInfo()
    for page in pages:
        info = info.apply(page.meta_patch)
        if page.records:
            info = info.with_defaults(semester=DEFAULT_SEMESTER)
    return info.with_defaults(year=default_year)


def extract_marks_from_pages(
    pages: Iterable[RawGlyphPage],
    config: LayoutConfig | None = None,
) -> list[PageMarksResult]:
    """
    Pages are processed strictly in iteration order; callers must supply
    ascending page numbers.
    """
    config = config or LayoutConfig()
    return [extract_marks_from_page(p.glyphs, config, page_num=p.page_num) for p in pages]


def _params_dict(layout: LayoutConfig, default_year: str) -> dict[str, Any]:
    params: dict[str, Any] = dict(layout.to_dict())
    params["default_year"] = default_year
    return params


def _document_meta(
    *,
    layout: LayoutConfig,
    default_year: str,
    page_results: list[PageMarksResult],
) -> dict[str, Any]:
    return {
        "stage": "marks",
        "version": _EXTRACTION_VERSION,
        "params": _params_dict(layout, default_year),
        "counts": {f"page_{p.page_num:03d}": dict(p.counts) for p in page_results},
        "audit_warnings": [],
    }


def _assemble(
    *,
    doc_id: str,
    engine: GlyphEngineName,
    source_relpath: str,
    page_results: list[PageMarksResult],
    layout: LayoutConfig,
    default_year: str,
) -> DocumentMarksResult:
    records: list[MarkRecord] = []
    for p in page_results:
        records.extend(p.records)

    return DocumentMarksResult(
        doc_id=doc_id,
        ok=True,
        engine=engine,
        source_relpath=source_relpath,
        records=records,
        meta_info=fold_meta_patches(page_results, default_year=default_year),
        pages=page_results,
        errors=[],
        meta=_document_meta(layout=layout, default_year=default_year, page_results=page_results),
    )


def validate_marks_result(result: DocumentMarksResult) -> list[ExtractMarksError]:
    """
    Lightweight validation: pages are ordered by ascending, unique page_num.
    extract_marks_from_pages trusts its caller on this.
    """

    errs: list[ExtractMarksError] = []
    nums = [p.page_num for p in result.pages]
    if nums != sorted(nums) or len(set(nums)) != len(nums):
        errs.append(
            ExtractMarksError(
                code="MARKS_NONDETERMINISTIC_PAGE_ORDER",
                message="Pages are not ordered by ascending unique page_num",
                detail={"page_nums": nums},
            )
        )
    return errs


def _with_errors(result: DocumentMarksResult, errors: list[ExtractMarksError]) -> DocumentMarksResult:
    return DocumentMarksResult(
        doc_id=result.doc_id,
        ok=False,
        engine=result.engine,
        source_relpath=result.source_relpath,
        records=result.records,
        meta_info=result.meta_info,
        pages=result.pages,
        errors=errors,
        meta=result.meta,
    )


def extract_marks_from_glyph_document(
    document: RawGlyphDocument,
    config: ExtractMarksConfig,
) -> DocumentMarksResult:
    """
    Extract from an already-loaded glyph document (no backend access).
    Pages are sorted by page_num and narrowed by `config.page_selection`.
    """
    source_relpath = document.source_relpath or ""
    doc_id = _compute_doc_id(
        source_relpath=source_relpath,
        backend_id=GlyphEngineName.GLYPH_JSON.value,
        merge_items=config.layout.merge_items,
        page_selection=config.page_selection,
    )

    page_count = max((p.page_num for p in document.pages), default=0)
    selected = set(parse_page_selection(config.page_selection, page_count=page_count))
    pages = sorted((p for p in document.pages if p.page_num in selected), key=lambda p: p.page_num)

    result = _assemble(
        doc_id=doc_id,
        engine=GlyphEngineName.GLYPH_JSON,
        source_relpath=source_relpath,
        page_results=extract_marks_from_pages(pages, config.layout),
        layout=config.layout,
        default_year=config.default_year,
    )
    validation_errors = validate_marks_result(result)
    return _with_errors(result, validation_errors) if validation_errors else result


def _iter_engine_pages(engine: GlyphSourceEngine, *, source_file: Path, page_nums: list[int]) -> Iterator[RawGlyphPage]:
    # One page fetched at a time; backend failures propagate to the caller.
    for page_num in page_nums:
        yield RawGlyphPage(page_num=page_num, glyphs=engine.get_page_glyphs(pdf_file=source_file, page_num=page_num))


def _failed(
    *,
    doc_id: str,
    config: ExtractMarksConfig,
    source_relpath: str,
    error: ExtractMarksError,
) -> DocumentMarksResult:
    return DocumentMarksResult(
        doc_id=doc_id,
        ok=False,
        engine=config.engine,
        source_relpath=source_relpath,
        records=[],
        meta_info=MetaInfo(),
        pages=[],
        errors=[error],
        meta={
            "stage": "marks",
            "version": _EXTRACTION_VERSION,
            "params": _params_dict(config.layout, config.default_year),
        },
    )


def run_extract_marks_relpath(*, config: ExtractMarksConfig, source_relpath: str) -> DocumentMarksResult:
    """
    Preferred programmatic entrypoint.

    Input: source document relpath under `config.data_root` (a PDF, or a glyph
    dump for the glyph_json engine)
    Output: concatenated mark records + finalized MetaInfo

    Input problems are reported as ok=False results; failures of the glyph
    backend itself are not caught.
    """

    engine = _get_engine(config.engine)
    doc_id = _compute_doc_id(
        source_relpath=source_relpath,
        backend_id=engine.backend_id(),
        merge_items=config.layout.merge_items,
        page_selection=config.page_selection,
    )

    expected_suffix = _EXPECTED_SUFFIX[config.engine]
    if not source_relpath.lower().endswith(expected_suffix):
        return _failed(
            doc_id=doc_id,
            config=config,
            source_relpath=source_relpath,
            error=ExtractMarksError(
                code="MARKS_INPUT_NOT_PDF" if expected_suffix == ".pdf" else "MARKS_INPUT_NOT_GLYPH_JSON",
                message=f"Engine {config.engine.value} only accepts {expected_suffix} inputs",
                detail={"source_relpath": source_relpath},
            ),
        )

    try:
        source_file = resolve_under_data_root(data_root=config.data_root, relpath=source_relpath)
    except DataAccessError as e:
        return _failed(
            doc_id=doc_id,
            config=config,
            source_relpath=source_relpath,
            error=ExtractMarksError(
                code="MARKS_DATA_ACCESS_ERROR",
                message=str(e),
                detail={"data_root": str(config.data_root), "relpath": source_relpath},
            ),
        )

    if not source_file.exists():
        return _failed(
            doc_id=doc_id,
            config=config,
            source_relpath=source_relpath,
            error=ExtractMarksError(
                code="MARKS_INPUT_NOT_FOUND",
                message="Input document not found",
                detail={"source_relpath": source_relpath},
            ),
        )

    try:
        page_count = engine.get_page_count(pdf_file=source_file)

        try:
            page_nums = parse_page_selection(config.page_selection, page_count=page_count)
        except ValueError as e:
            return _failed(
                doc_id=doc_id,
                config=config,
                source_relpath=source_relpath,
                error=ExtractMarksError(
                    code="MARKS_BAD_PAGE_SELECTION",
                    message="Invalid page_selection",
                    detail={"page_selection": config.page_selection, "error": str(e)},
                ),
            )

        page_results = extract_marks_from_pages(
            _iter_engine_pages(engine, source_file=source_file, page_nums=page_nums),
            config.layout,
        )
    finally:
        engine.close()
    result = _assemble(
        doc_id=doc_id,
        engine=config.engine,
        source_relpath=source_relpath,
        page_results=page_results,
        layout=config.layout,
        default_year=config.default_year,
    )

    if config.compute_source_sha256:
        try:
            result.meta["source_sha256"] = sha256_file(source_file)
        except OSError as e:
            result.meta["audit_warnings"].append({"code": "MARKS_SOURCE_HASH_FAILED", "error": repr(e)})

    result.meta["backend"] = {"id": engine.backend_id(), "version": engine.backend_version()}

    validation_errors = validate_marks_result(result)
    return _with_errors(result, validation_errors) if validation_errors else result
