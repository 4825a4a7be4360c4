from __future__ import annotations

from contextvars import ContextVar
from datetime import datetime, timezone
import json
import logging
from typing import Optional
import uuid


# Id of the API request being served; None outside a request.
current_request_id: ContextVar[Optional[str]] = ContextVar(
    "current_request_id", default=None
)


def generate_request_id() -> str:
    return uuid.uuid4().hex


class RequestIdFilter(logging.Filter):
    """Stamp records with the current request id unless one was passed in `extra`."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = current_request_id.get()
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    EXTRA_FIELDS = ("request_id", "task_id", "error_code", "path")

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in self.EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Configure the root logger once.

    - fmt="json": one JSON object per line (production).
    - anything else: human-readable text lines, prefixed with the request id.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, "_videogen", False):
            root.removeHandler(h)

    handler = logging.StreamHandler()
    handler._videogen = True  # type: ignore[attr-defined]
    handler.addFilter(RequestIdFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s [%(request_id)s]: %(message)s"
            )
        )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
