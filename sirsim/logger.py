"""Logging setup for applications using the simulator.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached once, on the ``sirsim`` package logger, by the application.
"""
import logging
import sys

PACKAGE_LOGGER = "sirsim"


def setup_logger(name: str = PACKAGE_LOGGER, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger writing to stderr.

    Args:
        name: Logger name, the package logger by default.
        level: Logging level.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers on repeated calls
    if logger.handlers:
        return logger

    # stdout carries the CSV table, so log lines go to stderr
    console_handler = logging.StreamHandler(sys.stderr)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    # Records stop here so a configured root logger does not print them twice
    logger.propagate = False

    return logger
