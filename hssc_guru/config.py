"""Settings read from the environment at import time."""
import os
from pathlib import Path
from typing import Callable, TypeVar

_N = TypeVar("_N", int, float)


def _env_number(name: str, default: _N, cast: Callable[[str], _N] = int) -> _N:
    """Numeric setting; unparsable values fall back to the default."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


def _env_dir(name: str, default: Path) -> Path:
    path = Path(os.environ.get(name) or default)
    path.mkdir(parents=True, exist_ok=True)
    return path


# Storage
DATA_DIR = _env_dir("GURU_DATA_DIR", Path.cwd() / "data")
DRAFTS_DIR = _env_dir("GURU_DRAFTS_DIR", DATA_DIR / "drafts")
DB_DIR = _env_dir("DB_DIR", DATA_DIR)
DATABASE_URL = os.environ.get("DATABASE_URL") or f"sqlite:///{DB_DIR / 'hssc_guru.db'}"
DB_TIMEOUT_SECONDS = _env_number("DB_TIMEOUT_SECONDS", 15)

# Auth
SECRET_KEY = os.environ.get("SECRET_KEY", "dev-only-secret-set-SECRET_KEY-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _env_number("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
SESSION_EXTEND_MINUTES = _env_number("SESSION_EXTEND_MINUTES", 60)
LOGIN_PATH = os.environ.get("LOGIN_PATH", "/login")

# Quiz sessions
DEFAULT_DURATION_MINUTES = _env_number("DEFAULT_DURATION_MINUTES", 30)
MIN_DURATION_MINUTES = _env_number("MIN_DURATION_MINUTES", 5)
MAX_DURATION_MINUTES = _env_number("MAX_DURATION_MINUTES", 180)
TICK_INTERVAL_SECONDS = _env_number("TICK_INTERVAL_SECONDS", 1.0, float)
PRACTICE_DEFAULT_LIMIT = _env_number("PRACTICE_DEFAULT_LIMIT", 10)
PRACTICE_MAX_LIMIT = _env_number("PRACTICE_MAX_LIMIT", 100)

# Maintenance
DRAFT_RETENTION_DAYS = _env_number("DRAFT_RETENTION_DAYS", 30)
CLEANUP_INTERVAL_SECONDS = _env_number("CLEANUP_INTERVAL_SECONDS", 24 * 60 * 60)
