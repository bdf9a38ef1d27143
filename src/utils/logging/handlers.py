"""
Logging wrappers that carry context.

Provides ContextLogger for attaching the current table or run details to
every log message emitted while a COPY block is processed.
"""

import logging
from typing import Any


class ContextLogger:
    """
    Logger wrapper that adds contextual information to all log messages

    Usage:
        logger = ContextLogger(__name__, table_name='public."Users"')
        logger.info("Block finished", rows=120)
        # Output includes both table_name and rows
    """

    def __init__(self, name: str, **context):
        """
        Initialize context logger

        Args:
            name: Logger name
            **context: Contextual key-value pairs to include in all logs
        """
        self.logger = logging.getLogger(name)
        self.context = context

    def _log(self, level: int, msg: str, *args, exc_info=None, **kwargs) -> None:
        extra = {**self.context, **kwargs}
        self.logger.log(level, msg, *args, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, exc_info=None, **kwargs) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def update_context(self, **context) -> None:
        """Add or replace context key-value pairs"""
        self.context.update(context)

    def clear_context(self, *keys: str) -> None:
        """Drop the given context keys"""
        for key in keys:
            self.context.pop(key, None)

    def get_context(self) -> dict[str, Any]:
        """Get a copy of the current context"""
        return self.context.copy()
