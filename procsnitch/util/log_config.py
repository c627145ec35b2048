"""
Logging configuration for procsnitch.

Every module asks for its logger through setup_logger() so that terminal
output stays uniform. Components that run inside a supervised session
(the supervisor and the samplers) also accept an injected logger, which is
what the CLI and the tests pass in.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = '[%(levelname)s] %(message)s'
FILE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s - %(message)s'


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: INFO)
        log_file: Optional file path for log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Calling twice for the same name must not stack handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt=FILE_FORMAT,
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def set_package_level(level: int) -> None:
    """Change the level of every procsnitch logger created so far."""
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not name.startswith("procsnitch") or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(level)
        for handler in logger.handlers:
            if isinstance(handler, logging.FileHandler):
                continue
            handler.setLevel(level)
