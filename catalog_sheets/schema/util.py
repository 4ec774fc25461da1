# catalog_sheets/schema/util.py
from __future__ import annotations

from typing import Any, Sequence


def cell(row: Sequence[Any], idx: int) -> str:
    """Trimmed string at row[idx]; short rows and None read as ""."""
    if idx >= len(row) or row[idx] is None:
        return ""
    return str(row[idx]).strip()
