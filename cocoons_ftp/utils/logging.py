"""Logging configuration for cocoons-ftp.

Provides centralized logging with PII redaction to ensure FTP
passwords are never written to the console or log files.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional, Set


LOGGER_NAME = "cocoons_ftp"

# PII patterns to redact from logs
PII_PATTERNS = [
    # Password in various formats
    (re.compile(r'(password["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(passwd["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(pass["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    # FTP URLs with credentials
    (re.compile(r'ftp://[^:]+:[^@]+@'), 'ftp://[REDACTED]@'),
]

# Literal secrets registered at runtime, masked as whole tokens
_secrets: Set[str] = set()

# Minimum length of a registered secret
MIN_SECRET_LENGTH = 4


class PIIRedactingFormatter(logging.Formatter):
    """Custom formatter that redacts PII from log messages.

    Besides the generic patterns, any literal registered with
    add_secret() (the FTP password of the current run) is masked.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting any PII."""
        message = super().format(record)
        for pattern, replacement in PII_PATTERNS:
            message = pattern.sub(replacement, message)
        for secret in _secrets:
            message = re.sub(
                rf"(?<!\w){re.escape(secret)}(?!\w)", "[REDACTED]", message
            )
        return message


def add_secret(value: Optional[str]) -> None:
    """Register a literal value that must never appear in log output."""
    if value and len(value) >= MIN_SECRET_LENGTH:
        _secrets.add(value)


def clear_secrets() -> None:
    """Forget all registered secrets."""
    _secrets.clear()


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure application logging with PII redaction.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for log output
        console: Whether to output to console (default True)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = PIIRedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
