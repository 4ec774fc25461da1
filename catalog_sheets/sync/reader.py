#===========================================================================
# catalog_sheets/sync/reader.py
# "read" action: fan out over every tab the form needs and assemble one payload.
#===========================================================================
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from catalog_sheets.google.ranges import a1
from catalog_sheets.google.sheets_client import SheetsClient
from catalog_sheets.schema.catalog import parse_brands, parse_products
from catalog_sheets.schema.categories import build_category_tree, category_paths
from catalog_sheets.schema.filters import category_filter_map, filter_default_map
from catalog_sheets.schema.properties import (
    derive_properties,
    legal_values,
    parse_legal_rows,
    section_map,
)

logger = logging.getLogger("uvicorn.error")

USE_DEFAULTS: Dict[str, Any] = {"useDefaults": True}

# logical tab → columns read
READ_RANGES = {
    "PRODUCTS_TODO": "A:D",
    "CATEGORIES": "A:A",
    "LEGAL": "A:ZZ",
    "PROPERTIES": "A:B",
    "BRANDS": "A:C",
    "FILTER": "A:B",
    "FILTER_DEFAULTS": "A:ZZ",
}


async def read_catalog(sheets: SheetsClient, tabs: Mapping[str, str]) -> Dict[str, Any]:
    """
    Everything the entry form needs, rebuilt from the sheet on every call.

    An empty categories tab (missing, unreadable or header-only) yields
    {"useDefaults": true} so the client falls back to its static data.
    """
    keys = list(READ_RANGES)
    results = await sheets.batch_get([a1(tabs[k], READ_RANGES[k]) for k in keys])
    raw = dict(zip(keys, results))

    paths = category_paths(raw["CATEGORIES"])
    if not paths:
        logger.warning("[READ] '%s' has no category paths; telling client to use defaults", tabs["CATEGORIES"])
        return dict(USE_DEFAULTS)

    legal_rows = parse_legal_rows(raw["LEGAL"])
    payload = {
        "products": parse_products(raw["PRODUCTS_TODO"]),
        "brands": parse_brands(raw["BRANDS"]),
        "categories": build_category_tree(paths),
        "properties": derive_properties(legal_rows, section_map(raw["PROPERTIES"])),
        "legalValues": legal_values(legal_rows),
        "categoryPathCount": len(paths),
        "categoryFilterMap": category_filter_map(raw["FILTER"]),
        "filterDefaultMap": filter_default_map(raw["FILTER_DEFAULTS"]),
    }
    logger.info(
        "[READ] %d products, %d brands, %d category paths, %d properties",
        len(payload["products"]), len(payload["brands"]), len(paths), len(payload["properties"]),
    )
    return payload
