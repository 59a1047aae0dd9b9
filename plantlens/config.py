import logging
import os
from dataclasses import dataclass

import pytz

PLACEHOLDER_KEYS = {"", "your_gemini_api_key_here"}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_timeout: float = 30.0
    timezone: str = "US/Eastern"
    max_image_side: int = 1536
    log_level: str = "INFO"

    @property
    def has_api_key(self):
        return self.gemini_api_key not in PLACEHOLDER_KEYS

    @property
    def tz(self):
        return pytz.timezone(self.timezone)


def load_settings(secrets=None, environ=None):
    """Build Settings from Streamlit secrets, then environment variables, then defaults.

    Malformed values are logged and replaced by their defaults.
    """
    secrets = secrets or {}
    environ = os.environ if environ is None else environ
    logger = logging.getLogger(__name__)

    def lookup(key, default):
        value = secrets.get(key)
        if value is None:
            value = environ.get(key)
        if value is None or str(value).strip() == "":
            return default
        return str(value).strip()

    def lookup_number(key, default, convert):
        value = lookup(key, default)
        try:
            number = convert(value)
        except (TypeError, ValueError):
            number = None
        if number is None or number <= 0:
            logger.warning("Invalid %s %r, using %s", key, value, default)
            return default
        return number

    defaults = Settings()
    timezone = lookup("PLANTLENS_TIMEZONE", defaults.timezone)
    try:
        pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown timezone %r, using %s", timezone, defaults.timezone)
        timezone = defaults.timezone

    return Settings(
        gemini_api_key=lookup("GEMINI_API_KEY", defaults.gemini_api_key),
        gemini_model=lookup("GEMINI_MODEL", defaults.gemini_model),
        gemini_timeout=lookup_number("GEMINI_TIMEOUT", defaults.gemini_timeout, float),
        timezone=timezone,
        max_image_side=lookup_number("PLANTLENS_MAX_IMAGE_SIDE", defaults.max_image_side, int),
        log_level=lookup("PLANTLENS_LOG_LEVEL", defaults.log_level).upper(),
    )


def configure_logging(level="INFO"):
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
