"""
Logging setup for the Tribunal backend.

Modules log through ``logging.getLogger(__name__)``; this module only
installs the root handler and carries the per-request id.
"""

import logging
import sys
from contextvars import ContextVar

# Request id of the HTTP request being served (set by middleware)
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    """Attach the current request id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stream handler on the root logger.

    Safe to call more than once; the previous handler is replaced.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_tribunal", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    handler._tribunal = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())


def truncate(value: str, limit: int = 200) -> str:
    """Shorten a value for log output."""
    if len(value) <= limit:
        return value
    return value[:limit] + "…"
