# catalog_sheets/errors.py
from __future__ import annotations

from typing import Any, Optional


class SheetsProxyError(Exception):
    """Base class for everything the proxy raises on purpose."""


class ServiceAccountKeyError(SheetsProxyError):
    pass


class TokenExchangeError(SheetsProxyError):
    """The OAuth token endpoint did not hand back an access_token."""

    def __init__(self, message: str, response: Any = None):
        super().__init__(message)
        self.response = response


class SheetsApiError(SheetsProxyError):
    """Non-2xx answer from the Sheets values API."""

    def __init__(self, message: str, *, range_: str = "", status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.range = range_
        self.status_code = status_code
        self.body = body


class InvalidRequest(SheetsProxyError):
    """Malformed request; always answered with HTTP 400."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
