"""
Logging configuration for Prompt Relay.
Provides structured logging with different levels and outputs.
"""

import functools
import logging
import sys
import time
from typing import Optional

from loguru import logger

from .config import settings


class InterceptHandler(logging.Handler):
    """Intercept standard logging messages toward loguru."""

    def emit(self, record):
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
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
        log_level = settings.log_level.upper()
    if log_file is None:
        log_file = settings.log_file

    # Remove default loguru handler
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
        colorize=not settings.is_production,
        backtrace=True,
        diagnose=settings.debug
    )

    # Serverless platforms collect stdout; a file sink is opt-in
    if log_file:
        logger.add(
            log_file,
            format=log_format,
            level=log_level,
            rotation="1 day",
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=settings.debug
        )

    # Intercept standard library logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    configure_external_loggers()

    logger.info(f"Logging configured - Level: {log_level}, Environment: {settings.environment}")


def configure_external_loggers():
    """Configure logging for external libraries."""

    external_loggers = [
        "aiohttp",
        "asyncio",
        "mangum",
        "uvicorn.access"
    ]

    for logger_name in external_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    if settings.is_development:
        logging.getLogger("prompt_relay").setLevel(logging.DEBUG)
    else:
        logging.getLogger("uvicorn").setLevel(logging.INFO)


def get_logger(name: str) -> "logger":
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logger.bind(name=name)


# =============================================================================
# LOGGING UTILITIES
# =============================================================================

def log_async_function_call(func):
    """Decorator to log async function calls with execution time."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        func_logger = get_logger(func.__module__)
        start_time = time.perf_counter()

        func_logger.debug(f"Calling async {func.__qualname__}")

        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            execution_time = time.perf_counter() - start_time
            func_logger.warning(
                f"Async {func.__qualname__} failed after {execution_time:.3f}s: {e}"
            )
            raise

        execution_time = time.perf_counter() - start_time
        func_logger.debug(f"Async {func.__qualname__} completed in {execution_time:.3f}s")
        return result

    return wrapper
