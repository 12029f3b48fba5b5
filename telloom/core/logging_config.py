"""
Logging setup for the Telloom backend.

Everything goes through the root logger: one console handler at the
configured level and, when ``ENABLE_FILE_LOGGING`` is set, a DEBUG file
handler writing ``<LOG_FILE_DIR>/telloom.log``. Request handlers, webhook
processing and the external API clients each get their own level from
``MODULE_LOG_LEVELS``.
"""

import logging
from pathlib import Path
from typing import Optional

from telloom.server.core.config import settings

LOG_LEVEL = settings.log_level.upper()
LOG_FORMAT = settings.log_format
LOG_FILE_DIR = settings.log_file_dir
ENABLE_FILE_LOGGING = settings.enable_file_logging

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

_FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

MODULE_LOG_LEVELS = {
    "telloom.core.database": "INFO",
    "telloom.integrations": "INFO",
    "telloom.server": "INFO",
    "telloom.server.api": "DEBUG",
    "telloom.server.services": "DEBUG",
    # noisy third parties
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _build_handler(handler: logging.Handler, level, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Install the Telloom handlers on the root logger, replacing any present.

    Args:
        log_level: Console level; defaults to ``TELLOOM_LOG_LEVEL``.
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to detailed.
        enable_file: Allow the file handler. It is only added when ``ENABLE_FILE_LOGGING`` is on as well.
    """
    level = (log_level or LOG_LEVEL).upper()
    format_name = log_format or LOG_FORMAT
    formatter = logging.Formatter(_FORMATS.get(format_name, DETAILED_FORMAT), datefmt=DATE_FORMAT)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    # handlers do the filtering
    root.setLevel(logging.DEBUG)
    root.addHandler(_build_handler(logging.StreamHandler(), level, formatter))

    write_file = enable_file and ENABLE_FILE_LOGGING
    if write_file:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        root.addHandler(_build_handler(logging.FileHandler(log_dir / "telloom.log"), logging.DEBUG, formatter))

    for name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(module_level)

    root.info(f"Logging configured: level={level}, format={format_name}, file_logging={write_file}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, usually called with ``__name__``."""
    return logging.getLogger(name)
