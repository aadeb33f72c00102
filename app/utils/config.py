"""
Environment-driven settings for the Applicant Tracker API
"""
import os
from dotenv import load_dotenv

from app.utils.exceptions import ConfigurationError

# Load environment variables from .env
load_dotenv()


def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer", config_key=key, config_value=raw, cause=e)


def _float_env(key: str, default: float) -> float:
    raw = os.getenv(key, str(default))
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number", config_key=key, config_value=raw, cause=e)


MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "applicant_tracker")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MAX_UPLOAD_BYTES = _int_env("MAX_UPLOAD_BYTES", 10 * 1024 * 1024)
RAW_TEXT_PREVIEW_CHARS = _int_env("RAW_TEXT_PREVIEW_CHARS", 2000)
SLOW_REQUEST_THRESHOLD = _float_env("SLOW_REQUEST_THRESHOLD", 2.0)
