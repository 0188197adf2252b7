"""Loguru setup for the importer service.

Every record carries a context block ``[request|session|entity]``. The request
id is set per HTTP request by ``RequestLoggingMiddleware``; session and entity
are bound by ``CsvImporter`` once it joins a session. Unset fields print ``-``.
"""
import os
import sys
from typing import Optional

from loguru import logger


LOG_LEVEL = os.getenv("CSV_IMPORT_LOG_LEVEL", "INFO")

CONTEXT_DEFAULTS = {"request_id": "-", "session": "-", "entity": "-"}

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>[{extra[request_id]}|{extra[session]}|{extra[entity]}]</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)


def configure_logging(level: Optional[str] = None, *, json_logs: bool = False) -> None:
    """Install one stderr sink; ``json_logs`` switches it to loguru's serialized records."""
    logger.remove()
    logger.configure(extra=dict(CONTEXT_DEFAULTS))
    logger.add(
        sys.stderr,
        level=level or LOG_LEVEL,
        format=LOG_FORMAT,
        serialize=json_logs,
        backtrace=False,
        diagnose=False,
    )


def get_logger(name: Optional[str] = None, **kwargs):
    """Return a logger bound with an optional module name and context fields."""
    if name:
        return logger.bind(module=name, **kwargs)
    return logger.bind(**kwargs)
