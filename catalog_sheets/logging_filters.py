# --- Global log redaction: keep keys and tokens out of the logs -----------------
import logging, re

_PEM_RE    = re.compile(r'-----BEGIN [A-Z ]*PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----', re.S)
_BEARER_RE = re.compile(r'(?i)(bearer\s+)[A-Za-z0-9._~+/=-]+')
_FIELD_RE  = re.compile(r'(?i)("?(?:access_token|assertion|private_key)"?\s*[:=]\s*"?)[^"&,\s}]+')

def redact(s: str) -> str:
    s = _PEM_RE.sub('<private key redacted>', s)
    s = _BEARER_RE.sub(r'\1<redacted>', s)
    return _FIELD_RE.sub(r'\1<redacted>', s)

class _SecretRedactFilter(logging.Filter):
    """Rewrite a record whose rendered message carries a private key or token."""
    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
        except Exception:
            return True
        if isinstance(msg, str):
            clean = redact(msg)
            if clean != msg:
                record.msg = clean
                record.args = ()
        return True

_FILTER = _SecretRedactFilter()

def install():
    # install once on common loggers (root + uvicorn family)
    for _name in ("", "uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(_name)
        if _FILTER not in lg.filters:
            lg.addFilter(_FILTER)
# --------------------------------------------------------------------------------
