"""Runtime settings read from the environment (and a .env file if present)."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from smartprep.db import DEFAULT_DB_PATH

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_SOURCE_CHARS = 30000

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    db_path: str = DEFAULT_DB_PATH
    max_source_chars: int = DEFAULT_MAX_SOURCE_CHARS
    extractor: str = "placeholder"
    simulate_latency: bool = True
    log_level: str = "WARNING"


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %d", name, value, default)
        return default


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from environment variables, loading .env first."""
    load_dotenv(env_file)
    return Settings(
        api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or None,
        model=os.environ.get("SMARTPREP_MODEL", DEFAULT_MODEL),
        db_path=os.environ.get("SMARTPREP_DB_PATH", DEFAULT_DB_PATH),
        max_source_chars=_env_int("SMARTPREP_MAX_SOURCE_CHARS", DEFAULT_MAX_SOURCE_CHARS),
        extractor=os.environ.get("SMARTPREP_EXTRACTOR", "placeholder").lower(),
        simulate_latency=_env_flag(os.environ.get("SMARTPREP_SIMULATE_LATENCY", "1")),
        log_level=os.environ.get("SMARTPREP_LOG_LEVEL", "WARNING").upper(),
    )
