# catalog_sheets/auth.py
# Request admission: allow-listed Origin OR a bearer-shaped Authorization header.
# The bearer value is not verified here; whoever consumes it downstream does that.
from __future__ import annotations

import logging
import re
from fnmatch import fnmatchcase
from typing import Iterable, Mapping, Optional

logger = logging.getLogger("uvicorn.error")

_BEARER_RE = re.compile(r"^\s*Bearer\s+\S+", re.IGNORECASE)


def origin_allowed(origin: Optional[str], allowed: Iterable[str]) -> bool:
    """Exact match, or shell-style wildcard match for entries containing '*'."""
    if not origin:
        return False
    o = origin.strip().rstrip("/").lower()
    for pattern in allowed:
        p = pattern.strip().rstrip("/").lower()
        if not p:
            continue
        if o == p or ("*" in p and fnmatchcase(o, p)):
            return True
    return False


def has_bearer(authorization: Optional[str]) -> bool:
    return bool(authorization and _BEARER_RE.match(authorization))


def is_authorized(
    headers: Mapping[str, str],
    allowed_origins: Iterable[str],
    anon_key: str = "",
) -> bool:
    origin = headers.get("origin")
    if origin_allowed(origin, allowed_origins):
        return True
    authorization = headers.get("authorization")
    if has_bearer(authorization):
        if anon_key and authorization.split(None, 1)[-1].strip() == anon_key:
            logger.debug("[AUTH] admitted with the project anon key")
        return True
    logger.warning("[AUTH] rejected request (origin=%s, bearer=no)", origin or "-")
    return False
