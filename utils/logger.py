import logging
import logging.config

from config import Settings


def setup_logging(settings: Settings) -> logging.Logger:
    if settings.LOG_TO_FILE:
        settings.LOG_DIR.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(settings.get_logging_config())
    return logging.getLogger("pixelstreak")
