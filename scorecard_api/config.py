# scorecard_api/config.py
from __future__ import annotations

import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


# -------------------------
# Remote persistence (OPTIONAL)
# -------------------------
# Empty -> scorecards persist into the in-process match store.
SCORECARD_REMOTE_URL: str = _get_env("SCORECARD_REMOTE_URL")
SCORECARD_REMOTE_TIMEOUT_SECONDS: int = _get_env_int("SCORECARD_REMOTE_TIMEOUT_SECONDS", 12)


# -------------------------
# Viewer polling
# -------------------------
# Viewers re-fetch on a fixed interval; reads are cached for the same window.
VIEWER_POLL_SECONDS: int = _get_env_int("VIEWER_POLL_SECONDS", 30)


# -------------------------
# Store seeding
# -------------------------
SCORECARD_SEED_MOCK: bool = _get_env("SCORECARD_SEED_MOCK", "1") == "1"


# -------------------------
# Logging
# -------------------------
SCORECARD_LOG_LEVEL: str = _get_env("SCORECARD_LOG_LEVEL", "INFO").upper()
SCORECARD_LOG_DIR: str = _get_env("SCORECARD_LOG_DIR")


def validate_config() -> None:
    if SCORECARD_REMOTE_URL and not SCORECARD_REMOTE_URL.startswith("http"):
        raise RuntimeError("SCORECARD_REMOTE_URL must start with http/https")

    if SCORECARD_REMOTE_TIMEOUT_SECONDS <= 0:
        raise RuntimeError("SCORECARD_REMOTE_TIMEOUT_SECONDS must be positive")

    if VIEWER_POLL_SECONDS <= 0:
        raise RuntimeError("VIEWER_POLL_SECONDS must be positive")

    if SCORECARD_LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise RuntimeError(f"SCORECARD_LOG_LEVEL is not a logging level: {SCORECARD_LOG_LEVEL}")
