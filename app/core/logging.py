"""Logging setup."""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.core.config import settings

EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+)")


def mask_email(email: str) -> str:
    """
    Mask an email address for safe logging.

    >>> mask_email("anna@example.com")
    'a***@example.com'
    """
    if not email or "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    return f"{local[0]}***@{domain}" if local else f"***@{domain}"


class ContactDataFilter(logging.Filter):
    """Masks student e-mail addresses in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = EMAIL_PATTERN.sub(r"\1***@\2", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(
    name: str = "app",
    level: str | None = None,
    log_file: str | None = None,
) -> logging.Logger:
    """
    Configure the application logger.

    Service modules log through ``logging.getLogger(__name__)`` and propagate
    to this logger, so handlers are attached once here.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or settings.LOG_LEVEL)

    # Avoid duplicate handlers on repeated startup
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ContactDataFilter())
    logger.addHandler(console_handler)

    log_file = log_file or settings.LOG_FILE
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(ContactDataFilter())
        logger.addHandler(file_handler)

    return logger
