import logging
import sys
from frontdesk.core.config import settings

def setup_logging():
    """
    Configure the application logger.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logger = logging.getLogger("frontdesk")
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)

    # Avoid duplicate handlers on reload
    if not logger.handlers:
        logger.addHandler(handler)

    return logger

logger = setup_logging()
