# catalog_sheets/google/ranges.py
# A1-notation helpers for addressing named tabs.
from __future__ import annotations


def column_letter(index: int) -> str:
    """0-based column index → spreadsheet letters (0 → A, 25 → Z, 26 → AA)."""
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")
    letters = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def quote_tab(tab: str) -> str:
    return "'" + tab.replace("'", "''") + "'"


def a1(tab: str, cells: str) -> str:
    """Qualified range, e.g. a1("PRODUCTS TO DO", "A:D") → 'PRODUCTS TO DO'!A:D"""
    return f"{quote_tab(tab)}!{cells}"
