# ----------------------------------------------------------------
# Configuration for the Google Sheets catalog proxy.
# Built once at startup and handed to create_app(); handlers read it
# from app.state instead of importing a module-level instance.
# ----------------------------------------------------------------
from __future__ import annotations

import os
import json as _json
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from dotenv import load_dotenv

from catalog_sheets.errors import ServiceAccountKeyError

# Load .env (allow container env to override file values)
load_dotenv(override=True)

# Logical tab keys accepted in the request "tabNames" mapping
TAB_KEYS = (
    "PRODUCTS_TODO",
    "CATEGORIES",
    "PROPERTIES",
    "LEGAL",
    "BRANDS",
    "FILTER",
    "FILTER_DEFAULTS",
    "RESPONSES",
)

DEFAULT_TAB_NAMES: Dict[str, str] = {
    "PRODUCTS_TODO": "PRODUCTS TO DO",
    "CATEGORIES": "Categories",
    "PROPERTIES": "PROPERTIES",
    "LEGAL": "LEGAL",
    "BRANDS": "BRANDS",
    "FILTER": "FILTER",
    "FILTER_DEFAULTS": "FILTER DEFAULTS",
    "RESPONSES": "OUTPUT",
}


def _rstrip_slash(s: str) -> str:
    return (s or "").rstrip("/")


def _get_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _get_list(name: str) -> List[str]:
    # Comma-separated list in .env, e.g. "https://example.com, https://*.foo.app"
    return [o.strip() for o in os.getenv(name, "").split(",") if o.strip()]


@dataclass
class Settings:
    # ── Google ───────────────────────────────────────────────────────────────
    GOOGLE_SERVICE_ACCOUNT_KEY: str = ""
    GOOGLE_SHEET_ID: str = ""
    GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    SHEETS_API_BASE: str = "https://sheets.googleapis.com/v4"

    # ── Supabase (bearer plumbing only; tokens are not verified here) ────────
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""

    # ── CORS / auth ──────────────────────────────────────────────────────────
    ALLOWED_ORIGINS: List[str] = field(default_factory=list)

    # ── Tabs ─────────────────────────────────────────────────────────────────
    TAB_NAMES: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TAB_NAMES))

    # ── Misc ─────────────────────────────────────────────────────────────────
    HTTP_TIMEOUT: float = 20.0
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        tabs = {
            key: os.getenv(f"SHEET_{key}", "").strip() or default
            for key, default in DEFAULT_TAB_NAMES.items()
        }
        return cls(
            GOOGLE_SERVICE_ACCOUNT_KEY=os.getenv("GOOGLE_SERVICE_ACCOUNT_KEY", ""),
            GOOGLE_SHEET_ID=os.getenv("GOOGLE_SHEET_ID", "").strip(),
            GOOGLE_TOKEN_URI=os.getenv("GOOGLE_TOKEN_URI", "") or cls.GOOGLE_TOKEN_URI,
            SHEETS_API_BASE=_rstrip_slash(os.getenv("SHEETS_API_BASE", "") or cls.SHEETS_API_BASE),
            SUPABASE_URL=_rstrip_slash(os.getenv("SUPABASE_URL", "")),
            SUPABASE_ANON_KEY=os.getenv("SUPABASE_ANON_KEY", ""),
            ALLOWED_ORIGINS=_get_list("ALLOWED_ORIGINS"),
            TAB_NAMES=tabs,
            HTTP_TIMEOUT=_get_float("HTTP_TIMEOUT", 20.0),
            LOG_LEVEL=(os.getenv("LOG_LEVEL", "") or "INFO").upper(),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.GOOGLE_SERVICE_ACCOUNT_KEY.strip() and self.GOOGLE_SHEET_ID)

    def service_account_info(self) -> dict:
        """Parse the service-account key JSON held in GOOGLE_SERVICE_ACCOUNT_KEY."""
        try:
            info = _json.loads(self.GOOGLE_SERVICE_ACCOUNT_KEY)
        except ValueError as e:
            raise ServiceAccountKeyError(f"GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON: {e}") from e
        if not isinstance(info, dict):
            raise ServiceAccountKeyError("GOOGLE_SERVICE_ACCOUNT_KEY must be a JSON object")
        missing = [k for k in ("client_email", "private_key") if not info.get(k)]
        if missing:
            raise ServiceAccountKeyError(
                f"GOOGLE_SERVICE_ACCOUNT_KEY is missing: {', '.join(missing)}"
            )
        # keys pasted into env vars often carry literal "\n" sequences
        info["private_key"] = info["private_key"].replace("\\n", "\n")
        return info

    def tab_names(self, overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Default tab names with any per-request overrides applied."""
        tabs = dict(self.TAB_NAMES)
        for key, name in (overrides or {}).items():
            if key in TAB_KEYS and name:
                tabs[key] = name
        return tabs
