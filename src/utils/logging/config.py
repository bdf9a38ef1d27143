"""
Logging setup for the dump sanitizer.

stdout carries the sanitized dump, so every handler installed here writes to
stderr or to a rotating log file.
"""

import logging
import logging.handlers
import os
import sys

from .formatters import ConsoleFormatter, JSONFormatter

DEFAULT_APP_NAME = "pgdump-sanitizer"

# Third-party loggers that retry noisily when no collector is reachable
QUIET_LOGGERS = ("opentelemetry", "grpc")


def _make_formatter(json_format: bool, app_name: str, colors: bool) -> logging.Formatter:
    if json_format:
        return JSONFormatter(app_name=app_name)
    return ConsoleFormatter(use_colors=colors)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
    json_format: bool = False,
    app_name: str = DEFAULT_APP_NAME,
    max_bytes: int = 100 * 1024 * 1024,  # 100MB
    backup_count: int = 5,
) -> None:
    """
    Configure root logging for one CLI invocation.

    Args:
        level: Log level name; unknown names fall back to INFO
        log_file: Also log to this file, rotated at max_bytes
        console_output: Log to stderr
        json_format: One JSON object per line instead of console text
        app_name: Value of the "app" field in JSON logs
        max_bytes: Log file size that triggers rotation
        backup_count: Rotated log files to keep
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = []

    if console_output:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_make_formatter(json_format, app_name, colors=True))
        handlers.append(handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(_make_formatter(json_format, app_name, colors=False))
        handlers.append(handler)

    for handler in handlers:
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging initialized: level={level}, file={log_file or 'none'}, "
        f"json={json_format}"
    )


def shutdown_logging() -> None:
    """Close and detach every root handler so log files are released."""
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    logging.shutdown()
