"""
Logging setup for RecruitMatch on top of Loguru.

Call ``setup_logging()`` once at process start (the CLI callback and the
API lifespan both do); modules then use ``get_logger(__name__)`` or
``LoggerMixin``.
"""

import sys
from typing import Any, Optional

from loguru import logger

from recruitmatch.utils.config import get_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<level>{message}</level>"
)

_configured = False


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """
    Install the console and file sinks described by ``LoggingSettings``.

    Args:
        level: Overrides ``LOG_LEVEL`` for this process (e.g. ``"DEBUG"``)
        force: Reinstall sinks even if logging was already configured
    """
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    log_settings = settings.logging
    level = (level or log_settings.level).upper()

    # diagnose prints local variable values, which may include credentials
    diagnose = settings.debug and settings.environment == "development"

    logger.remove()
    logger.configure(extra={"name": "recruitmatch"})

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=diagnose,
        )

    if log_settings.file_output:
        log_settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_settings.file_path,
            format=log_settings.format,
            level=level,
            rotation=log_settings.rotation,
            retention=log_settings.retention,
            compression="zip",
            backtrace=True,
            diagnose=diagnose,
            enqueue=True,
        )

    _configured = True
    logger.debug(f"Logging initialized ({level}, environment={settings.environment})")


def get_logger(name: str) -> Any:
    """Return the shared logger bound to ``name``."""
    return logger.bind(name=name)


class LoggerMixin:
    """Gives a class a ``logger`` bound to its class name."""

    @property
    def logger(self) -> Any:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
