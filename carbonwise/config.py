# carbonwise/config.py
from __future__ import annotations
import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()  # load .env before anything reads the environment


def require_env(keys: List[str]) -> None:
    missing = [k for k in keys if not os.getenv(k)]
    if missing:
        raise RuntimeError(
            "Missing required env vars: " + ", ".join(missing) +
            ". Create a .env file in your project root with those keys."
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def _optional_int_env(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return _int_env(name, 0)


# ---- Settings ---------------------------------------------------------------
MODEL = os.getenv("MODEL", "gpt-4o-mini")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SESSION_LIMIT = _int_env("SESSION_LIMIT", 1000)
PROFILE_HISTORY_LIMIT = _int_env("PROFILE_HISTORY_LIMIT", 500)
CHAT_HISTORY_LIMIT = 10

# unset -> every forecast draws a fresh trend
FORECAST_SEED = _optional_int_env("FORECAST_SEED")

FRONTEND_DIR = os.getenv("FRONTEND_DIR", os.path.join(os.getcwd(), "dist"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


def openai_key() -> Optional[str]:
    """Read at call time so tests and reloaded .env files take effect."""
    return os.getenv("OPENAI_API_KEY") or None
