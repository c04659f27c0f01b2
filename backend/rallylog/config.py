import os

def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + "/".join(p for p in val.split("/") if p)
    if len(val) > 1 and val.endswith("/"):
        val = val.rstrip("/") or "/"
    return val


def _parse_origins(raw):
    """Split a comma-separated origin list; a wildcard is never allowed."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if "*" in origins:
        raise ValueError(
            "ALLOWED_ORIGINS cannot include '*' (wildcard). Specify explicit, trusted origins."
        )
    return origins


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

# Empty disables CORS entirely.
ALLOWED_ORIGINS = _parse_origins(os.getenv("ALLOWED_ORIGINS"))
ALLOW_CREDENTIALS = os.getenv("ALLOW_CREDENTIALS", "true").lower() == "true"

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
