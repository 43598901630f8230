"""Логгер проекта LinkCrawler.

Every module logs through the one ``LinkCrawler`` logger::

    from link_crawler.logger import logger
    logger.info("Level %d: fetching %d pages", level, count)

The CLI calls :func:`init_logging` on each run, so handlers bind to the
``sys.stdout`` of that run (CliRunner swaps it in tests).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "LinkCrawler"

#: rotate the log file at 5 MiB, keep three old files
_ROTATE_BYTES: Final[int] = 5 * 1024 * 1024
_ROTATE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _with_format(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _drop_handlers(lg: logging.Logger) -> None:
    # close() releases the file of a RotatingFileHandler
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Настраивает логгер обхода: stdout и, если задан *log_file*, файл с ротацией.

    With *replace_handlers* the previous handlers are closed first;
    otherwise the new ones are added next to them.
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        _drop_handlers(lg)

    lg.addHandler(_with_format(logging.StreamHandler(sys.stdout), log_format))
    if log_file is not None:
        rotating = RotatingFileHandler(
            str(log_file), maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_BACKUPS, encoding="utf-8"
        )
        lg.addHandler(_with_format(rotating, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Логирование одного запуска: старые обработчики заменяются."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT"]
