# catalog_sheets/schema/catalog.py
# PRODUCTS TO DO (A=SKU, B=Brand, C=Status, D=Visibility) and BRANDS (A..C) parsing.
from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence

from catalog_sheets.schema.util import cell

STATUS_READY = "READY"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_visibility(raw: Any) -> int:
    """Leading integer of the cell ("1", "2 (temp)"), anything else → 0."""
    m = _LEADING_INT_RE.match(str(raw or ""))
    return int(m.group(1)) if m else 0


def parse_products(rows: Sequence[Sequence[Any]]) -> List[Dict[str, Any]]:
    """Rows that are READY and visible; exampleTitle falls back to the SKU."""
    products: List[Dict[str, Any]] = []
    for row in rows[1:]:
        sku = cell(row, 0)
        if not sku:
            continue
        status = cell(row, 2)
        visibility = parse_visibility(cell(row, 3))
        if status != STATUS_READY or visibility < 1:
            continue
        products.append({
            "sku": sku,
            "brand": cell(row, 1),
            "status": status,
            "visibility": visibility,
            "exampleTitle": sku,
        })
    return products


def parse_brands(rows: Sequence[Sequence[Any]]) -> List[Dict[str, str]]:
    brands: List[Dict[str, str]] = []
    for row in rows[1:]:
        brand = cell(row, 0)
        if not brand:
            continue
        brands.append({
            "brand": brand,
            "brandName": cell(row, 1),
            "website": cell(row, 2),
        })
    return brands


def brand_rows(brands: Sequence[Dict[str, Any]]) -> List[List[str]]:
    return [[b.get("brand", ""), b.get("brandName", ""), b.get("website", "")] for b in brands]
