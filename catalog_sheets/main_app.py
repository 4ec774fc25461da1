#=================================================================
# catalog_sheets/main_app.py
# FastAPI application entry-point.
#   uvicorn catalog_sheets.main_app:app
#=================================================================

import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from catalog_sheets import logging_filters
from catalog_sheets.config import Settings
from catalog_sheets.google.sheets_client import open_sheets
from catalog_sheets.routes import cors_headers, router

logger = logging.getLogger("uvicorn.error")


def create_app(
    settings: Optional[Settings] = None,
    sheets_factory: Optional[Callable] = None,
) -> FastAPI:
    """
    Build the app around an explicit Settings object.

    sheets_factory(settings) must return an async context manager yielding a
    SheetsClient-compatible object; defaults to a real Google client.
    """
    settings = settings or Settings.from_env()

    # --- Logging setup (console) ---
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s | %(message)s"
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging_filters.install()

    app = FastAPI(
        title="Catalog Google Sheets Proxy",
        description="Reads and writes the product-catalog Google Sheet for the data-entry form.",
    )
    app.state.settings = settings
    app.state.sheets_factory = sheets_factory or open_sheets
    app.include_router(router)

    # --- Global error handler (keeps full stack trace in logs) ---
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc), "useDefaults": True},
            headers=cors_headers(request),
        )

    if not settings.is_configured:
        logger.warning("GOOGLE_SERVICE_ACCOUNT_KEY / GOOGLE_SHEET_ID not set; every action answers useDefaults")
    if not settings.ALLOWED_ORIGINS:
        logger.info("ALLOWED_ORIGINS empty; only bearer-carrying requests are admitted")

    return app


app = create_app()
