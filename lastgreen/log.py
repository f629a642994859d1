from __future__ import annotations

import logging

LOGGER_NAME = "lastgreen"


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Configure the package logger once per process.

    INFO by default; DEBUG adds per-run and per-attempt detail. Calling this
    again only adjusts the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger
