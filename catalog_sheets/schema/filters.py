# catalog_sheets/schema/filters.py
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from catalog_sheets.schema.util import cell


def category_filter_map(rows: Sequence[Sequence[Any]]) -> List[Dict[str, str]]:
    """FILTER tab: A = category keyword, B = filter-default name (header skipped)."""
    out: List[Dict[str, str]] = []
    for row in rows[1:]:
        keyword, default = cell(row, 0), cell(row, 1)
        if keyword and default:
            out.append({"categoryKeyword": keyword, "filterDefault": default})
    return out


def filter_default_map(rows: Sequence[Sequence[Any]]) -> List[Dict[str, Any]]:
    """
    FILTER DEFAULTS grid: row 1 names each default, the cells below list the
    properties it allows. Columns with an empty header are skipped along with
    whatever data sits under them.
    """
    if not rows:
        return []
    header = rows[0]
    out: List[Dict[str, Any]] = []
    for col in range(len(header)):
        name = cell(header, col)
        if not name:
            continue
        allowed = [cell(row, col) for row in rows[1:]]
        out.append({"name": name, "allowedProperties": [a for a in allowed if a]})
    return out
