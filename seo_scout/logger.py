"""Logging setup for **SeoScout**.

All modules log through the ``"SeoScout"`` logger::

    from seo_scout.logger import logger
    logger.info("Crawl started")

Console output goes to *stderr*: ``seo-scout crawl`` prints NDJSON events on
stdout and they must stay machine-readable. The access log of the
``/api/analyze`` server (``aiohttp.access``) is routed to the same handlers.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SeoScout"
ACCESS_LOGGER_NAME: Final[str] = "aiohttp.access"

_LevelT = Union[int, str]


def _handlers(log_file: str | Path | None, fmt: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _reset(lg: logging.Logger) -> None:
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """(Re)configure the project logger and the server access log.

    Handlers installed by a previous call are closed and replaced, so the CLI
    and tests may call this repeatedly. *log_file* adds a rotating file
    (5 MB x 3) next to the stderr output.
    """
    handlers = _handlers(log_file, log_format)
    for name in (LOGGER_NAME, ACCESS_LOGGER_NAME):
        lg = logging.getLogger(name)
        _reset(lg)
        lg.setLevel(level)
        for handler in handlers:
            lg.addHandler(handler)
        lg.propagate = False
    return logging.getLogger(LOGGER_NAME)


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "LOGGER_NAME", "ACCESS_LOGGER_NAME", "DEFAULT_FORMAT"]
