import logging
import re
from logging.handlers import RotatingFileHandler
import sys

from chauffeur_api.core.config import settings

LOG_DIR = settings.LOG_DIR
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOG_FILE = LOG_DIR / "app.log"
LOG_FORMAT = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"

EMAIL_PATTERN = re.compile(r"([^\s@'\"]{1,3})[^\s@'\"]*@[^\s@'\",}]+")
SECRET_PATTERN = re.compile(r"((?:token|secret|pass(?:word)?)['\"]?\s*[:=]\s*['\"]?)([^\s'\",}]+)", re.IGNORECASE)


class SensitiveDataFilter(logging.Filter):
    """Masks customer emails and credentials before a record is written."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        message = EMAIL_PATTERN.sub(r"\1***", message)
        message = SECRET_PATTERN.sub(r"\1[REDACTED]", message)
        record.msg = message
        record.args = None
        return True


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # Prevent duplicate handlers if the logger is reused
    if not logger.handlers:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

        formatter = logging.Formatter(LOG_FORMAT)

        file_handler = RotatingFileHandler(
            LOG_FILE, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        try:
            # Reopen standard output stream in UTF-8 mode
            console_stream = open(sys.stdout.fileno(), mode="w", encoding="utf-8", closefd=False)
        except (AttributeError, OSError, ValueError):
            # fileno() is not available under some test runners and serverless hosts
            console_stream = sys.stdout

        console_handler = logging.StreamHandler(console_stream)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        if settings.is_production():
            logger.addFilter(SensitiveDataFilter())
        logger.setLevel(level)
        logger.propagate = False

    return logger
