"""
ThemeColor Configuration
Manages environment variables and defaults for the service.
"""
import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_PORT = 3000


def resolve_port(value: Optional[str]) -> int:
    """
    Resolve the listening port from a raw environment value.

    Args:
        value: Raw value of the PORT variable (None when unset)

    Returns:
        Port number, DEFAULT_PORT when the value is absent or empty
    """
    if not value:
        return DEFAULT_PORT
    return int(value)


def _optional_float(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    return float(value)


class Config:
    """Configuration class for the ThemeColor service."""

    # Server
    PORT: int = resolve_port(os.environ.get("PORT"))
    HOST: str = "0.0.0.0"

    # Logging
    LOG_LEVEL: str = os.environ.get("THEMECOLOR_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("THEMECOLOR_LOG_JSON", "0")))

    # Averaging engine (0 = one worker per CPU)
    WORKERS: int = int(os.environ.get("THEMECOLOR_WORKERS", "0"))
    TARGET_WIDTH: int = 50

    # Upstream fetch
    USER_AGENT: str = "Mozilla/5.0"
    FETCH_TIMEOUT: Optional[float] = _optional_float(os.environ.get("THEMECOLOR_FETCH_TIMEOUT"))
    FOLLOW_REDIRECTS: bool = bool(int(os.environ.get("THEMECOLOR_FOLLOW_REDIRECTS", "0")))

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("THEMECOLOR_METRICS_ENABLED", "1")))

    @classmethod
    def bind_address(cls) -> str:
        """Address the HTTP server listens on."""
        return f"{cls.HOST}:{cls.PORT}"


# Global config instance
config = Config()
