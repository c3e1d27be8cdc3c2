"""
Rich-based logger with sender and recipient context support for wacloud.

Provides context-aware logging: every message is prefixed with the sender
(phone_number_id) and recipient of the call currently in flight.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from wacloud.core.config.settings import settings


class CompactFormatter(logging.Formatter):
    """Custom formatter that shortens long module names for better readability."""

    def format(self, record):
        if record.name.startswith("wacloud."):
            # wacloud.messaging.whatsapp.client.whatsapp_client -> client.whatsapp_client
            parts = record.name.split(".")
            if len(parts) > 2:
                record.name = ".".join(parts[-2:])

        return super().format(record)


_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "debug": "dim white",
    }
)
_console = Console(theme=_theme)


class ContextLogger:
    """
    Logger wrapper that adds sender and recipient context to messages.

    Context is added as a message prefix instead of a format string field, so
    handlers configured outside this package keep working.
    """

    def __init__(
        self,
        logger: logging.Logger,
        tenant_id: str | None = None,
        user_id: str | None = None,
    ):
        self.logger = logger
        self.tenant_id = tenant_id or "---"
        self.user_id = user_id or "---"

    def _format_message(self, message: str) -> str:
        """Add context prefix to message."""
        from .context import get_current_tenant_context, get_current_user_context

        current_tenant = get_current_tenant_context() or self.tenant_id
        current_user = get_current_user_context() or self.user_id

        if current_tenant and current_tenant != "---":
            if current_user and current_user != "---":
                return f"[T:{current_tenant}][U:{current_user}] {message}"
            return f"[T:{current_tenant}] {message}"
        elif current_user and current_user != "---":
            return f"[U:{current_user}] {message}"
        return message

    def debug(self, message: str, *args, **kwargs) -> None:
        self.logger.debug(self._format_message(message), *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self.logger.info(self._format_message(message), *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self.logger.warning(self._format_message(message), *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self.logger.error(self._format_message(message), *args, **kwargs)


def setup_logging(
    *,
    level: str | None = None,
    mode: str | None = None,
    log_dir: str | None = None,
    console_fmt: str | None = None,
    file_fmt: str | None = None,
) -> None:
    """
    Initialize the root logger with Rich formatting.

    Arguments left as None are taken from settings (LOG_LEVEL, ENVIRONMENT,
    LOG_DIR).

    Parameters
    ----------
    level : str, optional
        Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
    mode : str, optional
        "DEV" creates daily log files + console; anything else → console only
    log_dir : str, optional
        Directory for log files (DEV mode only)
    console_fmt : str, optional
        Console format string
    file_fmt : str, optional
        File format string
    """
    level = level or settings.log_level
    mode = mode or settings.environment
    if log_dir is None and mode.upper() == "DEV":
        log_dir = settings.log_dir

    lvl = level.upper()
    lvl = lvl if lvl in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"

    # RichHandler already shows level and time
    console_format = console_fmt or "[%(name)s] %(message)s"
    file_format = file_fmt or "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    rich_handler = RichHandler(
        console=_console,
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        markup=False,
    )
    rich_handler.setFormatter(CompactFormatter(console_format))

    handlers: list[logging.Handler] = [rich_handler]

    if mode.upper() == "DEV" and log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, f"wacloud_{datetime.now():%Y%m%d}.log")
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(CompactFormatter(file_format))
        handlers.append(file_handler)

    logging.basicConfig(level=lvl, handlers=handlers, force=True)

    logging.getLogger("wacloud.logging").info(f"Logging initialized ({lvl})")


def get_logger(name: str) -> ContextLogger:
    """
    Get a logger that automatically uses call context variables.

    Args:
        name: Logger name (usually __name__)

    Returns:
        ContextLogger instance with automatic context from context variables
    """
    from .context import get_current_tenant_context, get_current_user_context

    base_logger = logging.getLogger(name)
    return ContextLogger(
        base_logger,
        tenant_id=get_current_tenant_context(),
        user_id=get_current_user_context(),
    )
