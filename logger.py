"""Logging configuration for Strongbox.

Everything goes to a date-named file under the configured log directory. The
console doubles as the session's output channel, so INFO records are shown
bare and only warnings and errors carry a level prefix there.
"""

import logging
from datetime import date
from config import Config

LOGGER_NAME = "strongbox"


class ConsoleFormatter(logging.Formatter):
    """Formatter that prefixes the level name only for non-INFO records."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname} - {message}"


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    file_handler = logging.FileHandler(
        config.log_dir / f"{LOGGER_NAME}-{date.today().isoformat()}.log",
        encoding="utf-8",
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(ConsoleFormatter("%(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The strongbox logger instance.
    """
    return logging.getLogger(LOGGER_NAME)
