"""
Logging setup with workspace context.

Every record passes through WorkspaceContextFilter, which stamps it with the
workspace and user the current request (or Celery task) acts for. The ids are
bound by accounts.authz.resolve_actor and cleared per request by
LogContextMiddleware.

Environment variables:
- LOG_FORMAT: "json" or "console" (default: json unless DEBUG)
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO, DEBUG when DEBUG)
"""
import json
import logging
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

APP_LOGGERS = (
    "accounts",
    "customers",
    "invoicing",
    "budget",
    "finance",
    "flow",
    "food",
    "dashboard",
    "ops",
    "celery",
)

_workspace_id: ContextVar[Optional[int]] = ContextVar("log_workspace_id", default=None)
_user_id: ContextVar[Optional[int]] = ContextVar("log_user_id", default=None)


def bind_log_context(workspace_id: Optional[int] = None, user_id: Optional[int] = None) -> None:
    _workspace_id.set(workspace_id)
    _user_id.set(user_id)


def clear_log_context() -> None:
    bind_log_context(None, None)


class WorkspaceContextFilter(logging.Filter):
    """Adds ``workspace_id`` and ``user_id`` attributes ("-" when unbound)."""

    def filter(self, record: logging.LogRecord) -> bool:
        workspace_id = _workspace_id.get()
        user_id = _user_id.get()
        record.workspace_id = "-" if workspace_id is None else workspace_id
        record.user_id = "-" if user_id is None else user_id
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, workspace, user (+ exc)."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "workspace": getattr(record, "workspace_id", "-"),
            "user": getattr(record, "user_id", "-"),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class LogContextMiddleware:
    """Drop context left behind by the previous request on this thread."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        clear_log_context()
        try:
            return self.get_response(request)
        finally:
            clear_log_context()


def _logger(level: str, handlers: list) -> dict:
    return {"handlers": handlers, "level": level, "propagate": False}


def get_logging_config(debug: bool = False) -> dict:
    """
    Build the Django LOGGING dict.

    Args:
        debug: settings.DEBUG; switches the defaults to console output at DEBUG

    Returns:
        Django LOGGING dict
    """
    log_level = os.environ.get("LOG_LEVEL", "DEBUG" if debug else "INFO")
    log_format = os.environ.get("LOG_FORMAT", "console" if debug else "json")

    formatter = "json" if log_format == "json" else "verbose"
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "workspace_context": {"()": "ops.logging_config.WorkspaceContextFilter"},
        },
        "formatters": {
            "json": {"()": "ops.logging_config.JsonFormatter"},
            "verbose": {
                "format": "[{asctime}] {levelname} {name} ws={workspace_id} user={user_id} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "filters": ["workspace_context"],
                "stream": "ext://sys.stdout",
            },
            "null": {"class": "logging.NullHandler"},
        },
        "loggers": {
            "": {"handlers": ["console"], "level": log_level},
            "django": _logger(log_level, ["console"]),
            "django.request": _logger(log_level if debug else "ERROR", ["console"]),
            "django.db.backends": _logger("DEBUG" if debug else "INFO", ["console"] if debug else ["null"]),
        },
    }
    for name in APP_LOGGERS:
        config["loggers"][name] = _logger(log_level, ["console"])

    return config
