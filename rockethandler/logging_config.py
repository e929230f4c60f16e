"""
Logging setup for Rocket Handler.

Log lines go to stdout, where the monitoring pipeline collects handler
output, and optionally to a rotating file. Raw API responses are logged
on failure, so configured credentials are masked in every record.
"""

import logging
import logging.handlers
import sys
from collections.abc import Iterable

ROOT_LOGGER = "rockethandler"
MASK = "********"


class RedactingFilter(logging.Filter):
    """Replace known secret values in the rendered log message."""

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self.secrets: set[str] = set()
        self.add(secrets)

    def add(self, secrets: Iterable[str]) -> None:
        # Very short values would mask unrelated text
        self.secrets.update(s for s in secrets if s and len(s) >= 4)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        for secret in self.secrets:
            message = message.replace(secret, MASK)
        record.msg = message
        record.args = None
        return True


_redactor = RedactingFilter()


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB default
    backup_count: int = 5
) -> None:
    """
    Configure the rockethandler logger hierarchy.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file, rotated at max_bytes
        max_bytes: Maximum bytes per log file before rotation (default: 10MB)
        backup_count: Number of rotated files to keep (default: 5)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] rocket-handler %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(_redactor)
        root_logger.addHandler(handler)

    root_logger.propagate = False


def mask_secrets(*secrets: str) -> None:
    """Mask these values (passwords, tokens) in all further log output."""
    _redactor.add(secrets)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    prefix = f"{ROOT_LOGGER}."
    if name.startswith(prefix):
        name = name[len(prefix):]

    return logging.getLogger(f"{prefix}{name}")
