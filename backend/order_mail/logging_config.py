"""Centralized logging configuration for vendor email parsing.

This module provides structured logging with context fields for the
extraction pipeline. Logs always go to the console; when LOG_DIR is set
they are also written to rotating files.

Usage:
    from order_mail.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Parsed email", extra={'vendor': 'rev', 'parse_method': 'vendor_rev'})
"""

import logging
import os
from logging.handlers import RotatingFileHandler

# Log directory from environment (file logging disabled when unset)
LOG_DIR = os.getenv("LOG_DIR")


class StructuredFormatter(logging.Formatter):
    """Custom formatter that adds context fields to log records.

    Supports the following context fields via extra={} parameter:
    - vendor: Vendor id the email was routed to
    - parse_method: Parse method used (vendor_rev, carrier, llm, ...)
    - sender_domain: Domain of the sender address
    """

    def format(self, record):
        """Format log record with context fields."""
        record.vendor = getattr(record, "vendor", None)
        record.parse_method = getattr(record, "parse_method", None)
        record.sender_domain = getattr(record, "sender_domain", None)

        return super().format(record)


def get_logger(name: str) -> logging.Logger:
    """Get configured logger for email parsing.

    Creates a logger with:
    - Console handler (INFO level)
    - Rotating file handler for all logs (DEBUG level), if LOG_DIR is set
    - Separate error file handler (ERROR level), if LOG_DIR is set

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logging.Logger instance
    """
    logger = logging.getLogger(name)

    # Skip if already configured (prevents duplicate handlers)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(
        StructuredFormatter("[%(levelname)s] [vendor:%(vendor)s] %(message)s")
    )
    logger.addHandler(console)

    if not LOG_DIR:
        return logger

    os.makedirs(LOG_DIR, exist_ok=True)
    file_format = (
        "[%(asctime)s] [%(levelname)s] [%(name)s] "
        "[vendor:%(vendor)s domain:%(sender_domain)s method:%(parse_method)s] %(message)s"
    )

    file_handler = RotatingFileHandler(
        os.path.join(LOG_DIR, "email_parsing.log"),
        maxBytes=10 * 1024 * 1024,  # 10MB per file
        backupCount=30,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(StructuredFormatter(file_format))
    logger.addHandler(file_handler)

    error_handler = RotatingFileHandler(
        os.path.join(LOG_DIR, "email_parsing_errors.log"),
        maxBytes=10 * 1024 * 1024,
        backupCount=30,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(StructuredFormatter(file_format))
    logger.addHandler(error_handler)

    return logger
