"""
ระบบบันทึกเหตุการณ์ (Logging)
ทุก log มี username และ operation สำหรับติดตามการเรียก API
"""

import logging
import sys
from pathlib import Path
from typing import Iterator, Optional
from contextlib import contextmanager
from contextvars import ContextVar

# Context variables for call-scoped logging
_username: ContextVar[Optional[str]] = ContextVar('username', default=None)
_operation: ContextVar[Optional[str]] = ContextVar('operation', default=None)


class ContextualFormatter(logging.Formatter):
    """Formatter that includes username and operation in logs"""

    def format(self, record: logging.LogRecord) -> str:
        record.username = _username.get() or "N/A"
        record.operation = _operation.get() or "N/A"
        return super().format(record)


def setup_logging(
    name: str = "tripjournal",
    level: Optional[str] = None,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Setup structured logger

    Args:
        name: Logger name
        level: Logging level (defaults to settings.log_level)
        log_file: Optional log file path

    Returns:
        Configured logger
    """
    # Lazy import to avoid circular dependency
    from tripjournal.core.config import settings

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers
    logger.handlers.clear()

    # stderr keeps stdout clean for CLI JSON output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_format = ContextualFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - [user=%(username)s] [op=%(operation)s] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    if log_file or settings.log_file:
        log_path = log_file or settings.log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(log_level)
        file_format = ContextualFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - [user=%(username)s] [op=%(operation)s] - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "tripjournal") -> logging.Logger:
    """
    Get logger instance

    Child loggers (``tripjournal.*``) propagate to the package logger, so
    only the root package logger gets handlers.
    """
    logger = logging.getLogger(name)
    root_name = name.split(".")[0]
    root = logging.getLogger(root_name)
    if not root.handlers:
        try:
            setup_logging(root_name)
        except (ImportError, AttributeError):
            # settings not importable yet (during config initialization)
            root.setLevel(logging.INFO)
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            root.addHandler(console_handler)
    return logger


def set_logging_context(username: Optional[str] = None, operation: Optional[str] = None):
    """
    Set logging context for the current call

    Args:
        username: Account name used for login/registration
        operation: Client operation being executed
    """
    if username:
        _username.set(username)
    if operation:
        _operation.set(operation)


@contextmanager
def logging_context(username: Optional[str] = None, operation: Optional[str] = None) -> Iterator[None]:
    """
    Scope logging context to a block

    Values set inside the block (including by nested calls) are rolled back
    on exit, so a finished operation never tags later log lines.
    """
    user_token = _username.set(username or _username.get())
    op_token = _operation.set(operation or _operation.get())
    try:
        yield
    finally:
        _operation.reset(op_token)
        _username.reset(user_token)
