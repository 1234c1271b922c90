"""Logging configuration for the order tool."""

import logging
import sys
from datetime import datetime
from pathlib import Path

from nbx_trader.bot.config import Credentials

LOGGER_NAME = "nbx_trader"
REDACTED = "***"


class CredentialFilter(logging.Filter):
    """Replace configured credential values in log records with ``***``.

    Applied on handlers so records propagated from child loggers
    (``nbx_trader.client``, ``nbx_trader.orders``) are covered too.
    """

    def __init__(self, credentials: Credentials):
        super().__init__()
        values = {
            credentials.account_id,
            credentials.key_id,
            credentials.secret.get_secret_value(),
            credentials.passphrase.get_secret_value(),
        }
        # Longest first so a value containing another is masked whole
        self._values = sorted((v for v in values if v), key=len, reverse=True)

    def redact(self, text: str) -> str:
        for value in self._values:
            text = text.replace(value, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._values:
            return True
        record.msg = self.redact(record.getMessage())
        record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        return True


def setup_logging(
    log_dir: str = "logs",
    log_level: int = logging.INFO,
    console_output: bool = True,
    credentials: Credentials | None = None,
) -> logging.Logger:
    """
    Configure logging for the order tool.

    Writes a daily ``nbx_trader_YYYY-MM-DD.log`` under ``log_dir`` and,
    optionally, echoes to stdout. When ``credentials`` are given their values
    are masked in every record both handlers emit.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Configured once per process
    if logger.handlers:
        return logger

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / f"nbx_trader_{datetime.now():%Y-%m-%d}.log"

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    redactor = CredentialFilter(credentials or Credentials())

    handlers: list[logging.Handler] = [logging.FileHandler(log_file, encoding="utf-8")]
    if console_output:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler.addFilter(redactor)
        logger.addHandler(handler)

    return logger
