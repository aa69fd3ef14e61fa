"""Centralized logging configuration for the rokka SDK."""

import logging
import os
import sys

SDK_LOGGER_NAME = "rokka_sdk"
LOG_LEVEL_ENV = "ROKKA_LOG_LEVEL"

_configured = False


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for the specified module.

    On first use the `rokka_sdk` root logger receives a stderr handler, unless the
    application already attached handlers to it. The level defaults to INFO and
    can be changed with the `ROKKA_LOG_LEVEL` environment variable.

    Args:
        module_name: Dotted name of the module, relative to the SDK package.

    Returns:
        logging.Logger: Logger named `rokka_sdk.<module_name>`.
    """
    global _configured

    sdk_logger = logging.getLogger(SDK_LOGGER_NAME)

    if not _configured and not sdk_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s [%(name)s] %(message)s"))
        sdk_logger.addHandler(handler)
        sdk_logger.setLevel(os.getenv(LOG_LEVEL_ENV, "INFO").upper())
        sdk_logger.propagate = False
        _configured = True

    return logging.getLogger(f"{SDK_LOGGER_NAME}.{module_name}")
