"""
Unified logging utilities for the physconst package.

Exports:
    - logger: Global Loguru logger (ready for use/import).
    - enable_logging: Turn on records emitted by physconst modules.
    - setup_logfile: Add file logging with rotation/compression.
    - setup_json_logfile: Add a JSON-format log file for machine parsing.

physconst is a library, so its records are disabled on import; applications
(and the CLI) call ``enable_logging()`` to see them.
"""

import sys
from loguru import logger

__all__ = [
    "logger",
    "enable_logging",
    "setup_logfile",
    "setup_json_logfile",
]

_PACKAGE = "physconst"


def enable_logging(level: str = "INFO", sink=None):
    """
    Enable physconst log records and route them to a sink.

    Args:
        level (str): Logging level (DEBUG, INFO, etc.).
        sink: Loguru sink, ``sys.stderr`` when omitted.

    Returns:
        int: The loguru handler id of the added sink.
    """
    logger.enable(_PACKAGE)
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        filter=_PACKAGE,
    )


def setup_logfile(
    log_path: str,
    rotation: str = "10 MB",
    retention: str = "10 days",
    compression: str = "zip",
    level: str = "INFO",
    colorize: bool = False
):
    """
    Add a rotating file handler to the global logger.

    Args:
        log_path (str): Path to the log file.
        rotation (str): Size or time string for log rotation.
        retention (str): How long to keep old logs.
        compression (str): Compression method for rotated logs.
        level (str): Logging level (DEBUG, INFO, etc.).
        colorize (bool): Colorize file output (default: False).
    """
    logger.enable(_PACKAGE)
    handler_id = logger.add(
        log_path,
        rotation=rotation,
        retention=retention,
        compression=compression,
        level=level.upper(),
        colorize=colorize,
        enqueue=True,  # Safe for multiprocessing
        backtrace=True,
        diagnose=True,
    )
    logger.info(f"Loguru file logging initialized: {log_path}")
    return handler_id


def setup_json_logfile(log_path: str, **kwargs):
    """
    Add a JSON-format log file (for machine parsing).
    Args:
        log_path (str): Path to JSON log file.
        **kwargs: Passed to logger.add().
    """
    logger.enable(_PACKAGE)
    handler_id = logger.add(
        log_path,
        serialize=True,
        **kwargs
    )
    logger.info(f"Loguru JSON logging initialized: {log_path}")
    return handler_id
