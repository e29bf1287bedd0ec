"""Application configuration and constants."""
import logging
import os
import sys
from pathlib import Path


def _resource_path(relative: str) -> Path:
    """Get path to bundled resource, works for PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        base_dir = Path(sys._MEIPASS) / "topik_practice"
    else:
        base_dir = Path(__file__).resolve().parent
    return base_dir / relative


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_log_level(name: str, default: int) -> int:
    """Parse logging level name (or number) from environment variable."""
    raw = os.environ.get(name)
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


# Directories
DATA_DIR = Path(os.environ.get("TOPIK_DATA_DIR", Path.cwd() / "data"))
DATA_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_BANK_PATH = _resource_path("data/default_bank.json")

# Storage
STORAGE_BACKEND = os.environ.get("TOPIK_STORAGE", "sqlite").strip().lower()
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DATA_DIR / 'topik.db'}"
)
QUESTION_BANK_KEY = "questionBank"
WRONG_ANSWERS_KEY = "wrongAnswers"

# Exam rules
LEVELS = ("topik1", "topik2")
CATEGORIES = ("listening", "reading", "writing")
MOCK_SECONDS = {
    "topik1": _parse_int_env("TOPIK1_MOCK_SECONDS", 30 * 60),
    "topik2": _parse_int_env("TOPIK2_MOCK_SECONDS", 50 * 60),
}
EXPORT_FILENAME_TEMPLATE = "topik-questions-export-{date}.json"

# Logging
LOG_LEVEL = _parse_log_level("TOPIK_LOG_LEVEL", logging.INFO)
