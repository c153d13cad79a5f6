"""Centralized logging configuration."""

import logging
import os
import sys
from typing import Any, Optional


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional log level override (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to the LOG_LEVEL environment variable, then INFO.

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Avoid duplicate handlers
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level, logging.INFO))

        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        console_handler.setFormatter(formatter)

        logger.addHandler(console_handler)

    return logger


def log_operation(logger: logging.Logger, operation: str, **context: Any) -> None:
    """Emit one summary line for a finished operation.

    Called after the operation has completed so that logging never gates
    control flow.
    """
    try:
        summary = ", ".join(f"{key}={value}" for key, value in context.items())
        logger.info(f"{operation}: {summary}", extra={"operation": operation})
    except Exception:
        logger.debug(f"Failed to format log line for {operation}", exc_info=True)
