#===========================================================================
# catalog_sheets/sync/writers.py
# Write protocols: whole-tab replace (categories, brands), legal-value upsert,
# submission append and SKU visibility.
#
# NOTE:
# - Replace is clear-then-write. The two calls are not atomic: if the write
#   fails after the clear succeeded, the tab stays cleared and the raised
#   error says so. There is no rollback.
# - The legal upsert is read-modify-write without locking. Two callers adding
#   values to the same property at the same time can pick the same column
#   and one value wins.
#===========================================================================
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from catalog_sheets.errors import InvalidRequest, SheetsApiError
from catalog_sheets.google.ranges import a1, column_letter
from catalog_sheets.google.sheets_client import SheetsClient
from catalog_sheets.models import SubmitProductRequest
from catalog_sheets.schema.catalog import brand_rows
from catalog_sheets.schema.util import cell

logger = logging.getLogger("uvicorn.error")

LEGAL_RANGE = "A:ZZ"
IMAGE_SLOTS = 8

LEGAL_APPENDED_ROW = "appended-row"
LEGAL_APPENDED_VALUE = "appended-value"
LEGAL_EXISTS = "exists"


async def _replace_block(
    sheets: SheetsClient,
    tab: str,
    first_col: str,
    last_col: str,
    rows: Sequence[Sequence[Any]],
) -> int:
    """Clear <tab>!<first>2:<last> and write rows from row 2 down."""
    await sheets.clear_range(a1(tab, f"{first_col}2:{last_col}"))
    logger.info("[WRITE] cleared %s rows 2+ (%s:%s)", tab, first_col, last_col)
    if not rows:
        return 0
    target = a1(tab, f"{first_col}2:{last_col}{len(rows) + 1}")
    try:
        await sheets.update_range(target, rows)
    except SheetsApiError as e:
        logger.error("[WRITE] %s was cleared but rewriting %d rows failed", tab, len(rows))
        raise SheetsApiError(
            f"Tab '{tab}' was cleared but writing {len(rows)} rows failed; "
            f"the tab is left empty until the data is written again. {e}",
            range_=target,
            status_code=e.status_code,
            body=e.body,
        ) from e
    return len(rows)


async def replace_categories(sheets: SheetsClient, tab: str, paths: Sequence[str]) -> int:
    count = await _replace_block(sheets, tab, "A", "A", [[p] for p in paths])
    logger.info("[WRITE] %s now holds %d category paths", tab, count)
    return count


async def replace_brands(sheets: SheetsClient, tab: str, brands: Sequence[Dict[str, Any]]) -> int:
    count = await _replace_block(sheets, tab, "A", "C", brand_rows(brands))
    logger.info("[WRITE] %s now holds %d brands", tab, count)
    return count


async def upsert_legal_value(sheets: SheetsClient, tab: str, property_name: str, value: str) -> str:
    """
    Add `value` to the property's LEGAL row.

    - no row for the property → append [property_name, value]
    - value already in the row → nothing to do
    - otherwise → PUT the value into the first column past the row's end
    """
    name = property_name.strip()
    value = value.strip()
    rows = await sheets.get_values(a1(tab, LEGAL_RANGE))

    for idx, row in enumerate(rows):
        if idx == 0 or cell(row, 0) != name:
            continue
        existing = [cell(row, c) for c in range(1, len(row))]
        if value in existing:
            logger.info("[WRITE] legal value %r already listed for %r", value, name)
            return LEGAL_EXISTS
        # first empty column after the last value: ["Dimmable","Yes","No"] → D, never over "No"
        col = column_letter(max(len(row), 1))
        target = a1(tab, f"{col}{idx + 1}")
        await sheets.update_range(target, [[value]])
        logger.info("[WRITE] legal value %r added to %r at %s", value, name, target)
        return LEGAL_APPENDED_VALUE

    await sheets.append_row(tab, [name, value])
    logger.info("[WRITE] new legal row for %r with %r", name, value)
    return LEGAL_APPENDED_ROW


async def append_submission(sheets: SheetsClient, tab: str, row: Sequence[Any]) -> None:
    await sheets.append_row(tab, row)
    logger.info("[WRITE] submission row (%d cells) appended to %s", len(row), tab)


async def set_visibility(sheets: SheetsClient, tab: str, sku: str, visible: int) -> int:
    """Write `visible` into column D of the SKU's row; returns the 1-based row number."""
    rows = await sheets.get_values(a1(tab, "A:A"))
    target_row = next(
        (i + 1 for i, row in enumerate(rows) if i > 0 and cell(row, 0) == sku.strip()),
        None,
    )
    if target_row is None:
        raise InvalidRequest(f'SKU "{sku}" not found', field="sku")
    await sheets.update_range(a1(tab, f"D{target_row}"), [[str(visible)]])
    logger.info("[WRITE] visibility for %s set to %s (row %d)", sku, visible, target_row)
    return target_row


def build_submission_row(req: SubmitProductRequest, now: Optional[datetime] = None) -> List[str]:
    """
    Flatten a product submission into the RESPONSES column order:
      timestamp, sku, brand, title, main path, other paths, all paths,
      image 1..8, specifications JSON, chatgptData, chatgptDescription,
      datasheetUrl, webpageUrl
    """
    ts = req.timestamp or (now or datetime.now(timezone.utc)).isoformat(timespec="seconds").replace("+00:00", "Z")
    main = req.main_category
    others = [p for p in req.additional_categories if p != main]
    images = (list(req.image_urls) + [""] * IMAGE_SLOTS)[:IMAGE_SLOTS]
    specs = json.dumps(req.specifications, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return [
        ts,
        req.sku,
        req.brand,
        req.title,
        main,
        ";".join(others),
        ";".join([main, *others]),
        *images,
        specs,
        req.chatgpt_data,
        req.chatgpt_description,
        req.datasheet_url,
        req.webpage_url,
    ]
