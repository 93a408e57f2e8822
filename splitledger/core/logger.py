"""
Logging configuration for SplitLedger.

All output goes through loguru; records emitted via the standard library
``logging`` module (uvicorn, pymongo) are intercepted and forwarded.
"""

import logging
import sys
from typing import Optional

from loguru import logger

from splitledger.core.config import settings


class InterceptHandler(logging.Handler):
    """Intercept standard logging messages toward loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None
) -> None:
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL.upper()
    if log_file is None:
        log_file = settings.LOG_FILE

    logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stdout,
        format=log_format,
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=settings.DEBUG
    )

    if log_file:
        logger.add(
            log_file,
            format=log_format,
            level=log_level,
            rotation="1 day",
            retention="30 days",
            backtrace=True,
            diagnose=False
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    configure_external_loggers()

    logger.info(f"Logging configured - Level: {log_level}, Environment: {settings.ENVIRONMENT}")


def configure_external_loggers():
    """Reduce noise from external libraries."""
    for logger_name in ("pymongo", "motor", "asyncio", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    if not settings.is_development:
        logging.getLogger("uvicorn").setLevel(logging.INFO)


def get_logger(name: str):
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (usually __name__)
    """
    return logger.bind(name=name)
