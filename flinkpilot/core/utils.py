import logging

from flinkpilot.core import config

_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATE_FORMAT = '%d-%b-%y %H:%M:%S'


def setup_logger(logger_name: str) -> logging.Logger:
    """Named console logger at the level configured through FLINKPILOT_LOG_LEVEL."""
    level = logging.getLevelName(config.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(f'flinkpilot.{logger_name}')
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
