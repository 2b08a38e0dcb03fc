from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .contracts import DocumentMarksResult


def serialize_marks_result(result: DocumentMarksResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_marks_result_json(*, result: DocumentMarksResult, out_json: Path) -> None:
    out_json.parent.mkdir(parents=True, exist_ok=True)
    out_json.write_text(serialize_marks_result(result), encoding="utf-8")
