import logging
import logging.handlers
from pathlib import Path

from .config import Config


def setup_logging(config: Config | None = None) -> logging.Logger:
    """Configure the ``licdash`` logger tree for a server process."""
    config = config or Config()
    logger = logging.getLogger("licdash")
    logger.setLevel(config.LOG_LEVEL)

    # Remove existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(config.LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.LOG_LEVEL)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (rotating)
    if config.LOG_FILE:
        log_path = Path(config.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
