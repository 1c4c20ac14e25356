"""
Logging configuration for the Poloniex client

Log records go to stderr so that command output on stdout stays parseable.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import IO, Optional

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _replace_handlers(logger: logging.Logger, handlers) -> None:
    for old in logger.handlers:
        old.close()
    logger.handlers = list(handlers)


def setup_logger(
    name: str,
    log_file: str = None,
    level: int = logging.INFO,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Setup a logger with console and optional file output.

    Calling it again for the same name closes and replaces the previous
    handlers. The logger does not propagate, so records are not printed a
    second time by the root logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    handlers = [console_handler]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    _replace_handlers(logger, handlers)
    return logger


def get_client_logger(verbose: bool = False, log_dir: str = None) -> logging.Logger:
    """
    Get the logger of the poloniex package.

    Module loggers (poloniex.client, poloniex.transport, ...) propagate to it.
    A dated log file is written when log_dir is given.
    """
    log_file = None
    if log_dir:
        log_file = str(Path(log_dir) / f"poloniex_{datetime.now().strftime('%Y%m%d')}.log")
    level = logging.DEBUG if verbose else logging.INFO
    return setup_logger("poloniex", log_file, level=level)
