"""Centralized logging setup."""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Setup centralized logging configuration."""
    logger = logging.getLogger("filestream")
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    # Add handler if not already added
    if not logger.handlers:
        logger.addHandler(console_handler)

    # aiohttp access log goes through the same format
    access_logger = logging.getLogger("aiohttp.access")
    access_logger.setLevel(level)
    if not access_logger.handlers:
        access_logger.addHandler(console_handler)

    return logger
