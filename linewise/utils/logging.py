"""Linewise logging utilities.

Every module obtains its logger through :func:`get_logger`. The CLI calls
:func:`configure_logging` once at start-up. Console records always go to
stderr so ``linewise explain --json`` can be piped; the optional log file
holds one JSON document per record, tagged with which strategy served a
request and why the remote model was skipped.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_NAME = "linewise.log"

# Record attributes copied into the JSON document when a call site sets them.
EXPLAIN_FIELDS = ("strategy", "reason", "lines", "provider", "path", "status")

# Request-level chatter from the HTTP stack; only their problems are shown.
_QUIET_LOGGERS = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON document.

    Only :data:`EXPLAIN_FIELDS` are taken from ``extra``, and only when they
    carry a value, so provider payloads never leak into the file.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, record.__dict__[key])
            for key in EXPLAIN_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def stderr_rich_handler(**kwargs: Any) -> RichHandler:
    """Build a :class:`RichHandler` bound to stderr."""

    return RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False, **kwargs)


def _console_handler(level: str, rich_console: bool) -> Dict[str, Any]:
    if rich_console:
        return {"()": "linewise.utils.logging.stderr_rich_handler", "formatter": "plain", "level": level}
    return {
        "class": "logging.StreamHandler",
        "formatter": "json",
        "level": level,
        "stream": "ext://sys.stderr",
    }


def _file_handler(log_dir: Path) -> Dict[str, Any]:
    log_dir.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "filename": str(log_dir / LOG_FILE_NAME),
        "maxBytes": 1024 * 1024,
        "backupCount": 3,
        "encoding": "utf-8",
    }


def default_log_dir() -> Path:
    return Path(os.environ.get("LINEWISE_LOG_DIR") or Path.home() / ".linewise" / "logs")


def configure_logging(
    *,
    level: str = "INFO",
    console_level: str = "WARNING",
    log_file: bool = True,
    log_dir: Optional[Path] = None,
    rich_console: Optional[bool] = None,
) -> None:
    """Configure the ``linewise`` logger hierarchy.

    Parameters
    ----------
    level:
        Lowest severity recorded at all.
    console_level:
        Lowest severity printed to stderr. Defaults to warnings so a remote
        failure is visible but the per-request strategy notes are not.
    log_file:
        Whether to keep the rotating JSON log.
    log_dir:
        Directory of the JSON log, :func:`default_log_dir` when omitted.
    rich_console:
        Rich output on the console; JSON lines when false. ``None`` reads
        ``$LINEWISE_RICH`` (``0`` disables Rich).

    Calling again replaces the previous handlers.
    """

    if rich_console is None:
        rich_console = os.environ.get("LINEWISE_RICH", "1") != "0"

    handlers: Dict[str, Dict[str, Any]] = {"console": _console_handler(console_level, rich_console)}
    if log_file:
        handlers["file"] = _file_handler(log_dir or default_log_dir())

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "linewise.utils.logging.JsonFormatter"},
                "plain": {"format": "%(message)s", "datefmt": "%H:%M:%S"},
            },
            "handlers": handlers,
            "loggers": {
                "linewise": {"level": level, "handlers": list(handlers), "propagate": False},
                **{name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
            },
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``linewise`` hierarchy."""

    if name != "linewise" and not name.startswith("linewise."):
        name = f"linewise.{name}"
    return logging.getLogger(name)


__all__ = ["EXPLAIN_FIELDS", "JsonFormatter", "configure_logging", "default_log_dir", "get_logger"]
