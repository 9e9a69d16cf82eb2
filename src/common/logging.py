import logging
import sys

from loguru import logger

from common.config import config

# Loguru config
logger.remove()
logger.add(sys.stderr, format=config.log_format, level=config.log_level, colorize=True)


class InterceptHandler(logging.Handler):
    """Route stdlib logging records (uvicorn, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(name=record.name).opt(exception=record.exc_info).log(level, record.getMessage())


def intercept_stdlib_logging(*names: str) -> None:
    for name in names:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


def get_logger(name: str | None = None):
    return logger.bind(name=name) if name else logger
