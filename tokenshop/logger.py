# tokenshop/logger.py
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "tokenshop"


def setup_logger(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the shared "tokenshop" logger.

    - Console output always
    - Daily rotating log file when log_dir is given
    - Unified log format with timestamp and level

    Child loggers (tokenshop.ledger, tokenshop.tokens, ...) propagate here.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers if setup_logger() is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=path / "tokenshop.log",
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logger initialized (level=%s, file=%s)", level, bool(log_dir))
    return logger
