"""
Structured logging configuration for the dump sanitizer

Provides console and JSON-formatted logging with contextual information.
All handlers write to stderr or a file: stdout carries the sanitized dump.

Usage:
    import logging

    from utils.logging import setup_logging

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", log_file="/var/log/pgdump-sanitizer/run.log")

    # Get logger for your module
    logger = logging.getLogger(__name__)

    # Log with context (never log raw field values)
    logger.info("Sanitized COPY block", extra={
        "table_name": 'public."Users"',
        "rows": 12345,
    })
"""

from .config import setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
