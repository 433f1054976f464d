import logging
import os

logger = logging.getLogger(__name__)


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _parse_positive_float(env_var: str, default: float) -> float:
    raw_value = os.getenv(env_var)
    if raw_value is None:
        return default

    try:
        value = float(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid float (got %r); defaulting to %.2f",
            env_var,
            raw_value,
            default,
        )
        return default

    if value <= 0:
        logger.warning("%s must be positive; defaulting to %.2f", env_var, default)
        return default

    return value


def parse_allowed_origins(raw, allow_credentials):
    """Split ``ALLOWED_ORIGINS`` and fail fast on unsafe or empty values."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if not origins:
        raise ValueError(
            "ALLOWED_ORIGINS environment variable must be set to a comma-separated "
            "list of trusted origins."
        )
    # credentials + wildcard origins is unsafe
    if allow_credentials and "*" in origins:
        raise ValueError(
            "ALLOWED_ORIGINS cannot include '*' (wildcard) when ALLOW_CREDENTIALS is true. "
            "Specify explicit, trusted origins."
        )
    return origins


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

ALLOW_CREDENTIALS = os.getenv("ALLOW_CREDENTIALS", "true").lower() == "true"
ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS", "").strip()

# Idle matches are dropped from the in-memory store after this long.
MATCH_TTL_SECONDS = _parse_positive_float("MATCH_TTL_SECONDS", 12 * 60 * 60)
CHRONO_TICK_SECONDS = _parse_positive_float("CHRONO_TICK_SECONDS", 1.0)
DEFAULT_SPORT = (os.getenv("DEFAULT_SPORT") or "volleyball").strip().lower()
