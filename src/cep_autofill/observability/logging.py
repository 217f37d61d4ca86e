"""Log setup for autofill sessions.

Each orchestrator owns a session id, and each API request runs under the
caller's ``X-Request-ID``. The id lives in a ContextVar, so every line logged
while a page is being resolved or filled can be traced back to that page,
however many pages one process is watching.
"""

import json
import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar

session_id: ContextVar[str] = ContextVar("cep_autofill_session", default="")

# extras that autofill code passes via logger.info(..., extra={...})
LOG_FIELDS = ("cep", "provider", "scope", "field", "duration_ms")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(session)s %(name)s: %(message)s"

QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "mlflow")


def new_session_id() -> str:
    return uuid.uuid4().hex[:12]


def get_session_id() -> str:
    return session_id.get()


@contextmanager
def session_scope(value: str | None = None):
    """Run a block under ``value`` (or a fresh id); yields the active id."""
    token = session_id.set(value or new_session_id())
    try:
        yield session_id.get()
    finally:
        session_id.reset(token)


class SessionFilter(logging.Filter):
    """Stamp records with the active session id ("-" outside any session)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session = session_id.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line: time, level, logger, message, session, autofill extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        session = session_id.get()
        if session:
            entry["session"] = session
        entry.update(
            (key, getattr(record, key)) for key in LOG_FIELDS if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(json_format: bool = False, level: str = "INFO") -> None:
    """Send logs to stderr so CLI output on stdout stays clean."""
    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(SessionFilter())
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
