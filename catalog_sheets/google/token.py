#===========================================================================
# catalog_sheets/google/token.py
# Service-account OAuth2: signed JWT assertion → short-lived bearer token.
#===========================================================================
from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx
from google.auth import crypt, jwt

from catalog_sheets.errors import ServiceAccountKeyError, TokenExchangeError

logger = logging.getLogger("uvicorn.error")

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
TOKEN_LIFETIME = 3600


def build_claims(client_email: str, token_uri: str, now: Optional[int] = None) -> Dict[str, Any]:
    iat = int(time.time()) if now is None else int(now)
    return {
        "iss": client_email,
        "scope": SHEETS_SCOPE,
        "aud": token_uri,
        "iat": iat,
        "exp": iat + TOKEN_LIFETIME,
    }


def load_signer(info: Dict[str, Any]) -> crypt.Signer:
    """RS256 signer from the PKCS8 PEM in a service-account key."""
    try:
        return crypt.RSASigner.from_service_account_info(info)
    except (ValueError, KeyError, TypeError) as e:
        raise ServiceAccountKeyError(f"Could not load service account private key: {e}") from e


def sign_assertion(signer: crypt.Signer, claims: Dict[str, Any]) -> str:
    """base64url(header).base64url(claims).base64url(RSASSA-PKCS1-v1_5/SHA-256 signature)"""
    return jwt.encode(signer, claims).decode("ascii")


def _parse_token_response(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class TokenProvider:
    """
    Turns a service-account key into a bearer token.

    One provider lives for one request; the token is fetched on first use
    and reused for the remaining Sheets calls of that request only.
    """

    def __init__(
        self,
        info: Dict[str, Any],
        *,
        token_uri: str,
        timeout: float = 20.0,
        signer: Optional[crypt.Signer] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.client_email = info.get("client_email", "")
        self.token_uri = token_uri
        self.timeout = timeout
        self._info = info
        self._signer = signer
        self._transport = transport
        self._clock = clock
        self._token: Optional[str] = None

    def assertion(self) -> str:
        if self._signer is None:
            self._signer = load_signer(self._info)
        claims = build_claims(self.client_email, self.token_uri, now=int(self._clock()))
        return sign_assertion(self._signer, claims)

    async def get_token(self) -> str:
        if self._token:
            return self._token

        payload = {"grant_type": JWT_BEARER_GRANT, "assertion": self.assertion()}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(self.token_uri, data=payload)

        data = _parse_token_response(resp)
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raw = json.dumps(data) if isinstance(data, (dict, list)) else str(data)
            logger.error("[TOKEN] exchange failed for %s (HTTP %s): %s", self.client_email, resp.status_code, raw)
            raise TokenExchangeError(f"Failed to get access token: {raw}", response=data)

        logger.debug("[TOKEN] access token issued for %s", self.client_email)
        self._token = token
        return token
