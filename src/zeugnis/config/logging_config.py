"""
Centralized logging configuration for the report card assistant.

Provides structured logging with Loguru. Library modules only emit records
through get_logger(); the embedding application decides where they go by
calling setup_structured_logging().
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_structured_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    serialize: bool = False
) -> None:
    """
    Configure logging with Loguru.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file (always written at DEBUG)
        serialize: Emit JSON records instead of formatted text

    Returns:
        None (Loguru configures its own handlers)
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        serialize=serialize,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[module]} | {message}",
        level=level,
        backtrace=True,
        diagnose=False   # No variable values in tracebacks (student names)
    )

    # File handler (optional - for local troubleshooting)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            serialize=True,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            compression="zip"
        )


def setup_logging_from_settings() -> None:
    """Configure logging from the ZEUGNIS_LOG_* settings."""
    from zeugnis.config.settings import get_settings

    settings = get_settings()
    setup_structured_logging(level=settings.log_level, log_file=settings.log_file)


def get_logger(name: str):
    """
    Get a logger for a specific module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance with module binding
    """
    return logger.bind(module=name)


# Records without an explicit module binding still render with the default format
logger.configure(extra={"module": "zeugnis"})
