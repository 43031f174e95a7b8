import logging
import sys

from loguru import logger

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error")


class UvicornHandler(logging.Handler):
    """Forwards uvicorn's stdlib records into loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, f"[{record.name}] {record.getMessage()}")


def setup_logging(settings):
    """Console sink at LOG_LEVEL, ERROR and above also to LOG_FILE when set."""
    logger.remove()
    logger.add(sys.stdout, level=settings.LOG_LEVEL, format=CONSOLE_FORMAT)
    if settings.LOG_FILE:
        logger.add(settings.LOG_FILE, level="ERROR", rotation="10 MB", retention="1 month", format=FILE_FORMAT)

    handler = UvicornHandler()
    for name in UVICORN_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def reset_logging():
    """Undo setup_logging: default stderr sink, uvicorn logs through stdlib again."""
    logger.remove()
    logger.add(sys.stderr)
    for name in UVICORN_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = []
        std_logger.propagate = True


__all__ = ["logger", "setup_logging", "reset_logging"]
