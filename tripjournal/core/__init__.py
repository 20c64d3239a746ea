"""
Core Module: Configuration, Logging, Exceptions
"""

from tripjournal.core.config import settings
from tripjournal.core.exceptions import (
    JournalException,
    JournalServiceError,
    InvalidResponseError,
    InvalidDataError,
    InvalidTokenError,
    NotFoundError,
    NetworkError,
    StorageException,
    ConfigException,
)
from tripjournal.core.logging import setup_logging, get_logger, logging_context

__all__ = [
    "settings",
    "JournalException",
    "JournalServiceError",
    "InvalidResponseError",
    "InvalidDataError",
    "InvalidTokenError",
    "NotFoundError",
    "NetworkError",
    "StorageException",
    "ConfigException",
    "setup_logging",
    "get_logger",
    "logging_context",
]
