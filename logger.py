"""Logging configuration for Spendbook.

All loggers live under the "spendbook" namespace so that the pipeline modules
(ingestion, services, tools) share the handlers installed by the CLI.
"""

import logging
from datetime import date
from typing import Optional

from config import Config

ROOT_LOGGER_NAME = "spendbook"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with a dated log file and the console.

    Args:
        config: Application configuration containing log settings.
        console: Whether to also log to stderr.

    Returns:
        The configured root application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Called once per CLI invocation, but tests may call it repeatedly
    logger.handlers.clear()

    file_handler = logging.FileHandler(
        config.log_dir / f"spendbook-{date.today().isoformat()}.log"
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or a child of it.

    Args:
        name: Optional module name; "ingestion.users" becomes
            "spendbook.ingestion.users".

    Returns:
        Logger instance inside the spendbook namespace.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
