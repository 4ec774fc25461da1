# catalog_sheets/sync/sanitize.py
from __future__ import annotations

from typing import Any, Iterable, List

# Leading characters the spreadsheet would evaluate as a formula
FORMULA_TRIGGERS = ("=", "+", "-", "@", "\t")


def sanitize(value: Any) -> str:
    """
    Escape a cell value so USER_ENTERED input is stored as literal text.

    A value starting with = + - @ or TAB gets a leading single quote.
    The quote itself is not a trigger, so sanitize(sanitize(x)) == sanitize(x).
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    if text.startswith(FORMULA_TRIGGERS):
        return "'" + text
    return text


def sanitize_row(values: Iterable[Any]) -> List[str]:
    return [sanitize(v) for v in values]
