"""
Static configuration for pogoprofile.

Purpose
-------
Settings fixed for the lifetime of a client session, read from environment
variables (``.env`` aware) with defaults and bounds checks. Bad values fall
back to the default with a warning instead of failing.

Non-Responsibilities
--------------------
- Game tunables such as avatar ranges or starter lists (ConfigManager)
- Credentials and transport settings (owned by the dispatcher collaborator)

Environment Variables
---------------------
- LOG_LEVEL: Logging level (default: INFO)
- LOG_JSON: Emit JSON log lines from ``setup_logging`` (default: off)
- POGOPROFILE_CONFIG_DIR: Directory of YAML files layered over the defaults
- CODENAME_MAX_ATTEMPTS: Upper bound on codename claim attempts (default: 10)
- PLAYER_LOCALE_COUNTRY / PLAYER_LOCALE_LANGUAGE / PLAYER_LOCALE_TIMEZONE
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """
    Centralized static configuration for pogoprofile.

    >>> Config.load()
    >>> Config.CODENAME_MAX_ATTEMPTS
    10
    """

    _validated: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Optional directory of YAML files layered over the packaged defaults
    CONFIG_DIR: Optional[Path] = None

    PLAYER_LOCALE_COUNTRY: str = "US"
    PLAYER_LOCALE_LANGUAGE: str = "en"
    PLAYER_LOCALE_TIMEZONE: str = "America/Los_Angeles"

    CODENAME_MAX_ATTEMPTS: int = 10

    # =========================================================================
    # Environment parsing
    # =========================================================================

    @classmethod
    def _safe_int(
        cls,
        key: str,
        default: int,
        min_val: Optional[int] = None,
        max_val: Optional[int] = None,
    ) -> int:
        """
        Parse an integer from the environment, falling back to `default`
        when unset, malformed or outside ``[min_val, max_val]``.

        >>> Config._safe_int("CODENAME_MAX_ATTEMPTS", 10, min_val=1, max_val=100)
        10
        """
        raw_value = os.getenv(key)
        if raw_value is None:
            return default

        try:
            value = int(raw_value)
        except ValueError:
            logging.warning(
                f"{key}='{raw_value}' is not a valid integer, using default {default}"
            )
            return default

        if min_val is not None and value < min_val:
            logging.warning(f"{key}={value} is below minimum {min_val}, using default {default}")
            return default
        if max_val is not None and value > max_val:
            logging.warning(f"{key}={value} exceeds maximum {max_val}, using default {default}")
            return default
        return value

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """Recognizes true/false, yes/no, 1/0, on/off (case-insensitive)."""
        raw_value = os.getenv(key)
        if raw_value is None:
            return default

        normalized = raw_value.lower().strip()
        if normalized in {"true", "yes", "1", "on"}:
            return True
        if normalized in {"false", "no", "0", "off"}:
            return False

        logging.warning(f"{key}='{raw_value}' is not a valid boolean, using default {default}")
        return default

    @classmethod
    def _safe_str(cls, key: str, default: str) -> str:
        return os.getenv(key, default)

    @classmethod
    def _safe_path(cls, key: str, default: Optional[Path]) -> Optional[Path]:
        """Empty values mean unset."""
        raw_value = cls._safe_str(key, "")
        if not raw_value:
            return default
        return Path(raw_value).expanduser()

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """Re-read every setting from the environment."""
        cls.LOG_LEVEL = cls._safe_str("LOG_LEVEL", "INFO").upper()
        cls.LOG_JSON = bool(cls._safe_bool("LOG_JSON", False))
        cls.CONFIG_DIR = cls._safe_path("POGOPROFILE_CONFIG_DIR", None)

        cls.PLAYER_LOCALE_COUNTRY = cls._safe_str("PLAYER_LOCALE_COUNTRY", "US")
        cls.PLAYER_LOCALE_LANGUAGE = cls._safe_str("PLAYER_LOCALE_LANGUAGE", "en")
        cls.PLAYER_LOCALE_TIMEZONE = cls._safe_str(
            "PLAYER_LOCALE_TIMEZONE", "America/Los_Angeles"
        )

        cls.CODENAME_MAX_ATTEMPTS = cls._safe_int(
            "CODENAME_MAX_ATTEMPTS", 10, min_val=1, max_val=100
        )

    @classmethod
    def validate(cls) -> None:
        """Load once and replace values that cannot be used with defaults."""
        if cls._validated:
            return

        logger = logging.getLogger(__name__)
        cls.load()

        if cls.LOG_LEVEL not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid LOG_LEVEL '{cls.LOG_LEVEL}', using INFO")
            cls.LOG_LEVEL = "INFO"

        if len(cls.PLAYER_LOCALE_COUNTRY) != 2:
            logger.warning(
                f"PLAYER_LOCALE_COUNTRY '{cls.PLAYER_LOCALE_COUNTRY}' is not "
                "a two-letter country code"
            )

        cls._validated = True

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        return {
            "log_level": cls.LOG_LEVEL,
            "log_json": cls.LOG_JSON,
            "codename_max_attempts": cls.CODENAME_MAX_ATTEMPTS,
            "player_locale": {
                "country": cls.PLAYER_LOCALE_COUNTRY,
                "language": cls.PLAYER_LOCALE_LANGUAGE,
                "timezone": cls.PLAYER_LOCALE_TIMEZONE,
            },
            "config_dir": str(cls.CONFIG_DIR) if cls.CONFIG_DIR else None,
        }


Config.validate()
