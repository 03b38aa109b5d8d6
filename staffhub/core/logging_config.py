"""
StaffHub - Logging Configuration

One named logger, ``staffhub``, shared by every module. Records are stamped
with the current request id and caller id (both held in context variables) by
RequestContextFilter. Production writes one JSON object per line; every other
environment writes readable text. A rotating file handler is added when
LOG_FILE is set.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from staffhub.core.config import settings


LOGGER_NAME = "staffhub"
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | %(module)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | [%(request_id)s] %(message)s"

_request_id: ContextVar[str] = ContextVar("request_id", default="")
_user_id: ContextVar[str] = ContextVar("user_id", default="")


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_user_id() -> str:
    return _user_id.get()


def set_user_id(user_id: str) -> None:
    _user_id.set(user_id)


def generate_request_id() -> str:
    """Short random id; enough to correlate lines of a single request"""
    return uuid.uuid4().hex[:8]


# Attributes every LogRecord carries; anything else came in through ``extra``
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime", "request_id", "user_id",
}


class RequestContextFilter(logging.Filter):
    """Copy the request/caller context variables onto each record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.user_id = get_user_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """Structured output for log shipping"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        if getattr(record, "request_id", "-") != "-":
            entry["request_id"] = record.request_id
        if getattr(record, "user_id", "-") != "-":
            entry["user_id"] = record.user_id

        entry.update({
            key: value for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        })

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class StaffHubLogger(logging.Logger):
    """Logger with helpers for the events this service cares about"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Access log line; 4xx at WARNING, 5xx at ERROR"""
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        """Register/login/credential events; failures at WARNING"""
        outcome = "ok" if success else "rejected"
        details = " ".join(part for part in (user_email, reason) if part)
        self.log(
            logging.INFO if success else logging.WARNING,
            f"[Auth] {event} {outcome}" + (f": {details}" if details else ""),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_upstream_call(self, method: str, url: str, status_code: Optional[int] = None,
                          duration_ms: float = 0.0, **kwargs) -> None:
        """One line per user directory request; failures at WARNING"""
        failed = status_code is None or status_code >= 400
        shown_status = status_code if status_code is not None else "no response"
        self.log(
            logging.WARNING if failed else logging.DEBUG,
            f"[Directory] {method} {url} -> {shown_status} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "upstream_call",
                "upstream_method": method,
                "upstream_url": url,
                "upstream_status": status_code,
                "duration_ms": round(duration_ms, 2),
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        """Error with traceback and where it happened"""
        self.error(
            f"{type(error).__name__} in {context or 'unknown context'}: {error}",
            exc_info=error,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **kwargs
            }
        )


def setup_logging() -> StaffHubLogger:
    """Build the ``staffhub`` logger from settings; safe to call again"""
    logging.setLoggerClass(StaffHubLogger)
    log = logging.getLogger(LOGGER_NAME)
    log.__class__ = StaffHubLogger
    log.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    log.propagate = False

    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    for log_filter in list(log.filters):
        log.removeFilter(log_filter)
    log.addFilter(RequestContextFilter())

    json_logs = settings.ENVIRONMENT == "production"

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(JSONFormatter() if json_logs else logging.Formatter(CONSOLE_FORMAT))
    log.addHandler(console)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=10 if json_logs else 5,
        )
        file_handler.setFormatter(JSONFormatter() if json_logs else logging.Formatter(TEXT_FORMAT))
        log.addHandler(file_handler)

    # Third-party chatter
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    log.debug(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "json_logging": json_logs},
    )
    return log


logger: StaffHubLogger = setup_logging()


__all__ = [
    "logger",
    "setup_logging",
    "get_request_id",
    "set_request_id",
    "get_user_id",
    "set_user_id",
    "generate_request_id",
    "RequestContextFilter",
    "JSONFormatter",
    "StaffHubLogger",
]
