import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .ranking import DEFAULT_FRECENCY_HALF_LIFE_HOURS, DEFAULT_SUGGESTION_HALF_LIFE_MINUTES
from .store import DEFAULT_MAX_NAME_LENGTH

PROJECT_ROOT = Path(__file__).parent.parent

load_dotenv(PROJECT_ROOT / ".env")

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _str_to_float(val: str | None, default: float) -> float:
    try:
        return float(val) if val is not None else default
    except Exception:
        return default


def _str_to_int(val: str | None, default: int) -> int:
    try:
        return int(val) if val is not None else default
    except Exception:
        return default


def default_db_path() -> str:
    """Return songmem.sql inside the XDG data directory."""
    data_dir = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return str(Path(data_dir) / "songmem.sql")


@dataclass(frozen=True)
class Settings:
    """Application configuration loaded from environment variables."""

    db_path: str
    log_level: str = "INFO"
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    frecency_half_life_hours: float = DEFAULT_FRECENCY_HALF_LIFE_HOURS
    suggestion_half_life_minutes: float = DEFAULT_SUGGESTION_HALF_LIFE_MINUTES

    @staticmethod
    def from_env() -> "Settings":
        """Load settings from environment variables."""
        db_path = os.getenv("SONGMEM_DB_PATH", "").strip() or default_db_path()

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level not in LOG_LEVELS:
            log_level = "INFO"

        max_name_length = _str_to_int(os.getenv("SONGMEM_MAX_NAME_LENGTH"), DEFAULT_MAX_NAME_LENGTH)
        if max_name_length <= 0:
            max_name_length = DEFAULT_MAX_NAME_LENGTH

        frecency_half_life_hours = _str_to_float(
            os.getenv("FRECENCY_HALF_LIFE_HOURS"), DEFAULT_FRECENCY_HALF_LIFE_HOURS
        )
        if frecency_half_life_hours <= 0:
            frecency_half_life_hours = DEFAULT_FRECENCY_HALF_LIFE_HOURS

        suggestion_half_life_minutes = _str_to_float(
            os.getenv("SUGGESTION_HALF_LIFE_MINUTES"), DEFAULT_SUGGESTION_HALF_LIFE_MINUTES
        )
        if suggestion_half_life_minutes <= 0:
            suggestion_half_life_minutes = DEFAULT_SUGGESTION_HALF_LIFE_MINUTES

        return Settings(
            db_path=db_path,
            log_level=log_level,
            max_name_length=max_name_length,
            frecency_half_life_hours=frecency_half_life_hours,
            suggestion_half_life_minutes=suggestion_half_life_minutes,
        )


def configure_logging(level: str) -> None:
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(levelname)s: %(message)s",
    )
