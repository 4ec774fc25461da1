#=======================================================================================
# catalog_sheets/routes.py
# Single action-tagged endpoint in front of the Google Sheet.
#
#   receive → parse JSON (400) → validate action + payload (400)
#   → credentials missing? {"useDefaults": true} → auth (401) → dispatch → one JSON object
#
# Served at "/" and "/google-sheets" so the same client URL works behind a
# functions-style prefix or directly.
#=======================================================================================
from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from catalog_sheets.auth import is_authorized
from catalog_sheets.config import Settings
from catalog_sheets.errors import InvalidRequest, SheetsProxyError
from catalog_sheets.google.sheets_client import SheetsClient
from catalog_sheets.models import (
    ACTION_MODELS,
    ReadRequest,
    SetVisibilityRequest,
    SubmitProductRequest,
    WriteBrandsRequest,
    WriteCategoriesRequest,
    WriteLegalRequest,
    WriteRowRequest,
    parse_request,
)
from catalog_sheets.sync.reader import USE_DEFAULTS, read_catalog
from catalog_sheets.sync.writers import (
    append_submission,
    build_submission_row,
    replace_brands,
    replace_categories,
    set_visibility,
    upsert_legal_value,
)

logger = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["Google Sheets"])

CORS_ALLOW_HEADERS = (
    "authorization, x-client-info, apikey, content-type, "
    "x-supabase-client-platform, x-supabase-client-platform-version, "
    "x-supabase-client-runtime, x-supabase-client-runtime-version"
)


def cors_headers(request: Request) -> Dict[str, str]:
    """Permissive CORS reflecting the caller's Origin (allow-list is not consulted)."""
    return {
        "Access-Control-Allow-Origin": request.headers.get("origin") or "*",
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Vary": "Origin",
    }


def _json(request: Request, content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=cors_headers(request))


async def _parse_json(request: Request) -> Any:
    raw = await request.body()
    try:
        return json.loads(raw.decode("utf-8")) if raw.strip() else None
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidRequest(f"Invalid JSON body: {e}") from e


# ---------------------------
# Action handlers
# ---------------------------
Tabs = Mapping[str, str]


async def _read(req: ReadRequest, sheets: SheetsClient, tabs: Tabs) -> Dict[str, Any]:
    return await read_catalog(sheets, tabs)


async def _write_row(req: WriteRowRequest, sheets: SheetsClient, tabs: Tabs) -> Dict[str, Any]:
    await append_submission(sheets, tabs["RESPONSES"], req.row_data)
    return {"success": True}


async def _submit(req: SubmitProductRequest, sheets: SheetsClient, tabs: Tabs) -> Dict[str, Any]:
    await append_submission(sheets, tabs["RESPONSES"], build_submission_row(req))
    return {"success": True}


async def _write_categories(req: WriteCategoriesRequest, sheets: SheetsClient, tabs: Tabs) -> Dict[str, Any]:
    count = await replace_categories(sheets, tabs["CATEGORIES"], req.category_paths)
    return {"success": True, "count": count}


async def _write_brands(req: WriteBrandsRequest, sheets: SheetsClient, tabs: Tabs) -> Dict[str, Any]:
    brands = [b.model_dump(by_alias=True) for b in req.brands]
    count = await replace_brands(sheets, tabs["BRANDS"], brands)
    return {"success": True, "count": count}


async def _write_legal(req: WriteLegalRequest, sheets: SheetsClient, tabs: Tabs) -> Dict[str, Any]:
    outcome = await upsert_legal_value(sheets, tabs["LEGAL"], req.property_name, req.value)
    return {"success": True, "result": outcome}


async def _set_visibility(req: SetVisibilityRequest, sheets: SheetsClient, tabs: Tabs) -> Dict[str, Any]:
    row = await set_visibility(sheets, tabs["PRODUCTS_TODO"], req.sku, req.visible)
    return {"success": True, "row": row}


HANDLERS: Dict[type, Callable[[Any, SheetsClient, Tabs], Awaitable[Dict[str, Any]]]] = {
    ReadRequest: _read,
    WriteRowRequest: _write_row,
    SubmitProductRequest: _submit,
    WriteCategoriesRequest: _write_categories,
    WriteBrandsRequest: _write_brands,
    WriteLegalRequest: _write_legal,
    SetVisibilityRequest: _set_visibility,
}

_unhandled = set(ACTION_MODELS.values()) - set(HANDLERS)
if _unhandled:
    raise RuntimeError(f"No handler for: {sorted(m.__name__ for m in _unhandled)}")


# ---------------------------
# Routes
# ---------------------------
@router.options("/")
@router.options("/google-sheets")
async def preflight(request: Request):
    return PlainTextResponse("ok", headers=cors_headers(request))


@router.post("/")
@router.post("/google-sheets")
async def google_sheets(request: Request):
    settings: Settings = request.app.state.settings

    try:
        req = parse_request(await _parse_json(request))
    except InvalidRequest as e:
        logger.warning("[SHEETS] bad request: %s", e.message)
        return _json(request, {"error": e.message}, 400)

    # missing credentials is not an error, even for unauthenticated callers
    if not settings.is_configured:
        logger.info("[SHEETS] Google Sheets credentials not configured, using defaults")
        return _json(request, dict(USE_DEFAULTS))

    if not is_authorized(request.headers, settings.ALLOWED_ORIGINS, settings.SUPABASE_ANON_KEY):
        return _json(request, {"error": "Unauthorized"}, 401)

    action = req.action
    tabs = settings.tab_names(req.tab_overrides())
    try:
        async with request.app.state.sheets_factory(settings) as sheets:
            result = await HANDLERS[type(req)](req, sheets, tabs)
    except InvalidRequest as e:
        logger.warning("[SHEETS] %s rejected: %s", action, e.message)
        return _json(request, {"error": e.message}, 400)
    except (SheetsProxyError, httpx.HTTPError) as e:
        logger.error("[SHEETS] %s failed: %s", action, e)
        return _json(request, {"error": str(e), "useDefaults": True}, 500)

    return _json(request, result)


@router.get("/health")
async def health(request: Request):
    settings: Settings = request.app.state.settings
    return {"status": "running", "configured": settings.is_configured}
