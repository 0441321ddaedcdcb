# =============================================================================
# hospital_core/logging/config.py
# Logging Configuration for the Hospital Registry
# =============================================================================

import logging
import sys
import time
from pathlib import Path
from datetime import datetime
from typing import Optional


LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_DIR = Path("logs")

# Chatty third-party loggers pulled in by firebase_admin
NOISY_LOGGERS = (
    "urllib3",
    "google",
    "google.auth",
    "cachecontrol",
    "firebase_admin",
)


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_filename: Optional[str] = None,
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (default: INFO)
        log_to_file: Whether to also log to a file
        log_filename: Custom log filename (default: hospitals_YYYY-MM-DD.log)
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_to_file:
        LOG_DIR.mkdir(exist_ok=True)
        if log_filename is None:
            log_filename = f"hospitals_{datetime.now().strftime('%Y-%m-%d')}.log"
        handlers.append(logging.FileHandler(LOG_DIR / log_filename, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("hospital_core").info("Logging initialized")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Usage:
        from hospital_core.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Listener attached")
    """
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for logging a store operation with its timing.

    ``target`` may be set inside the block once the database path is
    known; it is included in the completion or failure line.

    Usage:
        with LogContext(logger, "Adding hospital") as op:
            op.target = "hospitals/2024"
            ref.push(fields)
        # Logs: "Adding hospital... started"
        # Logs: "Adding hospital... completed at hospitals/2024 (0.21s)"
    """

    def __init__(self, logger: logging.Logger, operation: str, target: Optional[str] = None):
        self.logger = logger
        self.operation = operation
        self.target = target
        self.elapsed: Optional[float] = None
        self._start = None

    def __enter__(self):
        self._start = time.time()
        self.logger.info(f"{self.operation}... started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.time() - self._start
        where = f" at {self.target}" if self.target else ""

        if exc_type is None:
            self.logger.info(f"{self.operation}... completed{where} ({self.elapsed:.2f}s)")
        else:
            self.logger.error(
                f"{self.operation}... failed{where} ({self.elapsed:.2f}s): {exc_val}",
                exc_info=True,
            )

        return False  # Don't suppress exceptions
