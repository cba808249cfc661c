"""Logging setup. Every record carries the current request id (or "-")."""

import logging
import sys
from contextvars import ContextVar

from agentsites.core.config import get_settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [req=%(request_id)s] %(message)s"

# Chatty libraries pinned to WARNING unless debugging.
_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "uvicorn.access")


class RequestIdFilter(logging.Filter):
    """Copy the request id from context onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def setup_logging() -> None:
    """Configure root logging to stdout.

    DEBUG when settings.debug, else INFO. SQL statement logging follows
    DATABASE_ECHO.
    """
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        handlers=[handler],
        force=True,
    )
    quiet_level = logging.DEBUG if settings.debug else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
    if settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
