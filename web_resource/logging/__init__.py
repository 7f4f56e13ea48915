"""
Logging setup for web_resource.
"""

from .filters import CredentialMaskFilter
from .formatters import StructuredFormatter
from .manager import LoggingManager, cleanup_logging, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "cleanup_logging",
    "StructuredFormatter",
    "CredentialMaskFilter",
]
