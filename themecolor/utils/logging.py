"""
ThemeColor Structured Logging
Centralized logging configuration using loguru.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from themecolor.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


class StructuredLogger:
    """Structured logger for the ThemeColor service."""

    def __init__(self, level: Optional[str] = None, serialize: Optional[bool] = None, sink=None):
        """
        Args:
            level: Minimum level to emit (default from config)
            serialize: Emit JSON records instead of text (default from config)
            sink: Loguru sink (default sys.stdout)
        """
        self.level = level or config.LOG_LEVEL
        self.serialize = config.LOG_JSON if serialize is None else serialize
        self.sink = sink if sink is not None else sys.stdout
        self._configure_logger()

    def _configure_logger(self):
        """Replace loguru's default handler with our sink."""
        logger.remove()
        logger.add(
            self.sink,
            format=LOG_FORMAT,
            level=self.level,
            serialize=self.serialize
        )

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = logger.bind(**extra) if extra else logger
        # depth=2 attributes the record to the caller, not this wrapper
        target.opt(depth=2).log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log info message with optional extra data."""
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log warning message with optional extra data."""
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log error message with optional extra data."""
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log debug message with optional extra data."""
        self._log("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
