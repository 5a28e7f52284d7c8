import logging
import sys

from task_service.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("task_service")


def configure_logging(settings: Settings) -> logging.Logger:
    """Send service logs to stdout at the configured level"""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    logger.setLevel(log_level)

    # Quiet per-request access lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # debug turns on SQL echo, which logs through this logger
    if not settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logger
