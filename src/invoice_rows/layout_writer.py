"""Write rendered row layouts to JSONL files."""

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .row_layout import RowResult
from .surface import DrawnCell


def cell_to_label(cell: DrawnCell) -> Dict[str, Any]:
    """Convert a drawn cell to a JSON-serializable dict. bbox is [x0, top, x1, bottom] in mm."""
    return {
        "kind": cell.kind,
        "page_index": cell.page,
        "text": cell.text,
        "bbox": [round(v, 3) for v in cell.bbox],
        "align": cell.align,
        "font_family": cell.font_family,
        "font_size": cell.font_size,
        "color": list(cell.color),
    }


def row_to_label(row: RowResult, doc_id: str) -> Dict[str, Any]:
    """Convert a rendered row to a JSON-serializable dict."""
    return {
        "doc_id": doc_id,
        "line_index": row.index,
        "page_index": row.page,
        "base_y": round(row.base_y, 3),
        "col_height": round(row.col_height, 3),
        "end_y": round(row.end_y, 3),
        "cells": [cell_to_label(c) for c in row.cells],
    }


def write_layout(rows: Sequence[RowResult], path: Path, doc_id: str) -> int:
    """Write one JSON line per row. Returns the number of rows written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row_to_label(row, doc_id), ensure_ascii=False) + "\n")
    return len(rows)


def read_layout(path: Path) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]
