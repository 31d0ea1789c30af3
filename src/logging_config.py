"""
Logging configuration for the scramble word engine.
Provides dual-handler logging (console + file) with detailed formatting.
"""
#
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler


DEFAULT_LOG_PREFIX = "scramble_engine"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)s:%(lineno)d - %(funcName)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s - %(message)s"

# HTTP client libraries are chatty at DEBUG
NOISY_LOGGERS = ("aiohttp", "anthropic", "httpx", "httpcore")


def _log_file_path(output_dir: str, prefix: str) -> str:
    output_dir = os.path.expanduser(output_dir)
    os.makedirs(output_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(output_dir, f"{prefix}_{stamp}.log")


def _release_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    output_dir: str,
    log_level: str = "INFO",
    log_file_prefix: str = DEFAULT_LOG_PREFIX,
    enable_console: bool = True,
) -> str:
    """
    Route engine logs to a rotating file and, optionally, stdout.

    The file always receives DEBUG; the console follows log_level. Calling
    this again replaces the handlers from the previous call.

    Args:
        output_dir: Directory for the log file (~ is expanded)
        log_level: Console level name (unknown names mean INFO)
        log_file_prefix: Log filename prefix, followed by a timestamp
        enable_console: Also log to stdout

    Returns:
        Path to the log file
    """
    log_path = _log_file_path(output_dir, log_file_prefix)
    console_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    _release_handlers(root_logger)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    root_logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(console_level, logging.INFO))

    logger = logging.getLogger(__name__)
    logger.info(f"Engine logging to {log_path}")
    logger.debug(f"Console level: {log_level}, console enabled: {enable_console}")

    return log_path


def setup_logging_from_config(config) -> str:
    """Configure logging from an EngineConfig's logging section."""
    return setup_logging(
        output_dir=config.logging.directory,
        log_level=config.logging.level,
        enable_console=config.logging.console,
    )
