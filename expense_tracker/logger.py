"""Logging setup for the expense tracker.

The engines stay quiet; the record store and the app log through the
``expense_tracker`` logger configured here.
"""

import logging

from expense_tracker.config import Settings

LOGGER_NAME = "expense_tracker"


def setup_logging(settings: Settings) -> logging.Logger:
    """Attach a console handler to the package logger.

    Existing handlers are cleared first, so calling this on every Streamlit
    rerun does not duplicate output.

    Args:
        settings: Application settings carrying ``log_level``.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler()
    console_handler.setLevel(settings.log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it when ``name`` is given."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
