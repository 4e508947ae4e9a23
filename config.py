"""Application configuration — environment variables and derived constants.

Loads ``BOT_TOKEN``, ``API_ROOT``, ``REQUEST_TIMEOUT``, ``POLL_RETRY_DELAY``
and ``LOG_LEVEL`` from the environment via ``python-dotenv``.  All values are
resolved at import time so the host program can ``from config import …``
without repeated lookups.  The library packages never import this module.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.logger import CourierLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

# ── Logger (used for startup diagnostics at the bottom of this module) ───────
logger = CourierLogger.get_logger()


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_positive_float(name: str, raw: str | None, default: float) -> float:
    """Parse *raw* as a positive number of seconds, falling back to *default*."""
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid numeric setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default
    if value <= 0:
        logger.warning("Non-positive setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default
    return value


def _parse_log_level(raw: str | None) -> str:
    """Return an upper-cased logging level name, defaulting to ``INFO``."""
    level = (raw or "INFO").strip().upper()
    if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
        logger.warning("Unknown LOG_LEVEL, using INFO", extra={"value": raw})
        return "INFO"
    return level


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
API_ROOT: str = os.environ.get("API_ROOT") or "https://api.telegram.org"
REQUEST_TIMEOUT: float = _parse_positive_float("REQUEST_TIMEOUT", os.environ.get("REQUEST_TIMEOUT"), 30.0)
POLL_RETRY_DELAY: float = _parse_positive_float("POLL_RETRY_DELAY", os.environ.get("POLL_RETRY_DELAY"), 5.0)
LOG_LEVEL: str = _parse_log_level(os.environ.get("LOG_LEVEL"))


# ── Startup diagnostics ─────────────────────────────────────────────────────

if BOT_TOKEN:
    logger.info("Config loaded — BOT_TOKEN is set", extra={"api_root": API_ROOT})
else:
    logger.warning("Config loaded — BOT_TOKEN is NOT set")

logger.info(
    "Timeouts resolved",
    extra={"request_timeout": REQUEST_TIMEOUT, "poll_retry_delay": POLL_RETRY_DELAY, "log_level": LOG_LEVEL},
)
