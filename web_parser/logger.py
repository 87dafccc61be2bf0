# web_parser/logger.py
"""
Логгер ``WebParser``: один именованный логгер на весь обходчик.

Краулер, диспетчер вебхука и HTTP-сервер берут его через
``logging.getLogger("WebParser")``; CLI перенастраивает уровень и файл
через :func:`init_logging`.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT"]

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_NAME = "WebParser"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUPS = 3

_Level = Union[int, str]


def _handler(target: Union[Path, str, None], fmt: str) -> logging.Handler:
    """stdout, если *target* пуст, иначе файл с ротацией."""
    if target is None:
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    else:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            str(target), maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8"
        )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _Level = "INFO",
    log_file: Union[Path, str, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """
    Перенастраивает логгер обходчика.

    Старые обработчики закрываются (если ``replace_handlers``), затем
    добавляется вывод в stdout и, при заданном ``log_file``, в файл.
    """
    lg = logging.getLogger(_NAME)
    lg.setLevel(level)
    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()

    lg.addHandler(_handler(None, log_format))
    if log_file is not None:
        lg.addHandler(_handler(log_file, log_format))
    lg.propagate = False
    return lg


def init_logging(
    level: _Level = "INFO",
    log_file: Union[Path, str, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()
