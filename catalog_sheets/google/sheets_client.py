#===========================================================================
# catalog_sheets/google/sheets_client.py
# Google Sheets values API: get / append / clear / update on named ranges.
# Every outbound cell goes through the formula-injection sanitizer.
#===========================================================================
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence
from urllib.parse import quote

import httpx

from catalog_sheets.config import Settings
from catalog_sheets.errors import SheetsApiError
from catalog_sheets.google.ranges import a1
from catalog_sheets.google.token import TokenProvider
from catalog_sheets.sync.sanitize import sanitize_row

logger = logging.getLogger("uvicorn.error")

USER_ENTERED = "USER_ENTERED"

Rows = List[List[str]]


class SheetsClient:
    """Thin async wrapper over /v4/spreadsheets/{id}/values for one request."""

    def __init__(
        self,
        spreadsheet_id: str,
        tokens: TokenProvider,
        *,
        api_base: str = "https://sheets.googleapis.com/v4",
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.tokens = tokens
        self._base = f"{api_base.rstrip('/')}/spreadsheets/{spreadsheet_id}/values"
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "SheetsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    # --- helpers -----------------------------------------------------------

    def _url(self, range_: str, suffix: str = "") -> str:
        return f"{self._base}/{quote(range_, safe='')}{suffix}"

    async def _headers(self) -> dict:
        token = await self.tokens.get_token()
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _grid(values: Sequence[Sequence[Any]]) -> Rows:
        return [sanitize_row(row) for row in values]

    def _fail(self, op: str, range_: str, resp: httpx.Response) -> SheetsApiError:
        logger.error("[SHEETS] %s %s failed (HTTP %s): %s", op, range_, resp.status_code, resp.text)
        return SheetsApiError(
            f"Failed to {op} {range_}: {resp.text}",
            range_=range_,
            status_code=resp.status_code,
            body=resp.text,
        )

    # --- primitives ----------------------------------------------------------

    async def get_values(self, range_: str) -> Rows:
        """
        Rows of the range, or [] when Sheets answers non-2xx.
        An empty result therefore means "nothing found", not "confirmed empty".
        """
        resp = await self._client.get(self._url(range_), headers=await self._headers())
        if resp.is_error:
            logger.error("[SHEETS] read %s failed (HTTP %s): %s", range_, resp.status_code, resp.text)
            return []
        data = resp.json() if resp.content else {}
        return data.get("values") or []

    async def batch_get(self, ranges: Sequence[str]) -> List[Rows]:
        """Fan-out reads; results come back in the order of `ranges`."""
        # warm the token once so the parallel reads don't each exchange a JWT
        await self.tokens.get_token()
        return list(await asyncio.gather(*(self.get_values(r) for r in ranges)))

    async def append_row(self, tab: str, row: Sequence[Any]) -> dict:
        range_ = a1(tab, "A1")
        resp = await self._client.post(
            self._url(range_, ":append"),
            params={"valueInputOption": USER_ENTERED, "insertDataOption": "INSERT_ROWS"},
            headers=await self._headers(),
            json={"values": self._grid([row])},
        )
        if resp.is_error:
            raise self._fail("append to", range_, resp)
        return resp.json() if resp.content else {}

    async def clear_range(self, range_: str) -> dict:
        resp = await self._client.post(
            self._url(range_, ":clear"),
            headers=await self._headers(),
            json={},
        )
        if resp.is_error:
            raise self._fail("clear", range_, resp)
        return resp.json() if resp.content else {}

    async def update_range(self, range_: str, values: Sequence[Sequence[Any]]) -> dict:
        resp = await self._client.put(
            self._url(range_),
            params={"valueInputOption": USER_ENTERED},
            headers=await self._headers(),
            json={"range": range_, "majorDimension": "ROWS", "values": self._grid(values)},
        )
        if resp.is_error:
            raise self._fail("update", range_, resp)
        return resp.json() if resp.content else {}


@asynccontextmanager
async def open_sheets(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[SheetsClient]:
    """SheetsClient + TokenProvider for one request, built from settings."""
    tokens = TokenProvider(
        settings.service_account_info(),
        token_uri=settings.GOOGLE_TOKEN_URI,
        timeout=settings.HTTP_TIMEOUT,
        transport=transport,
    )
    async with SheetsClient(
        settings.GOOGLE_SHEET_ID,
        tokens,
        api_base=settings.SHEETS_API_BASE,
        timeout=settings.HTTP_TIMEOUT,
        transport=transport,
    ) as client:
        yield client
