"""
Logging setup for applications that embed web_resource.

Library modules only ever call ``logging.getLogger(__name__)``. Output is
configured here, on the ``web_resource`` logger, when an application (or the
command-line interface) opts in.
"""

import logging
import sys
from typing import Optional, TextIO

from ..config.models import LoggingConfig, LogLevel
from .filters import CredentialMaskFilter
from .formatters import StructuredFormatter

ROOT_LOGGER_NAME = "web_resource"


class LoggingManager:
    """Installs and removes the package's console handler."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream
        self.handler: Optional[logging.Handler] = None

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Route package log records to stderr according to ``config``.

        Calling this again replaces the previously installed handler.

        Args:
            config: Logging configuration
        """
        self.cleanup()

        handler = logging.StreamHandler(self.stream or sys.stderr)
        if config.enable_structured:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter(config.format))
        handler.addFilter(CredentialMaskFilter())

        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        package_logger.setLevel(config.level.value)
        package_logger.addHandler(handler)
        self.handler = handler

        package_logger.debug(f"Logging configured at {config.level.value}")

    def set_level(self, level: LogLevel, component: Optional[str] = None) -> None:
        """
        Change the level of the package logger or of one of its children.

        Args:
            level: New level
            component: Dotted logger name, e.g. ``web_resource.cache``
        """
        logging.getLogger(component or ROOT_LOGGER_NAME).setLevel(level.value)

    def cleanup(self) -> None:
        """Detach and close the installed handler, if any."""
        if self.handler is None:
            return
        logging.getLogger(ROOT_LOGGER_NAME).removeHandler(self.handler)
        self.handler.close()
        self.handler = None

    def is_configured(self) -> bool:
        return self.handler is not None


_manager = LoggingManager()


def setup_logging(config: LoggingConfig) -> None:
    """Configure package logging through the shared manager."""
    _manager.setup_logging(config)


def cleanup_logging() -> None:
    """Undo ``setup_logging``."""
    _manager.cleanup()
