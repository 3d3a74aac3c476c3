"""Logging utilities.

Every record carries the current run id and pipeline step, and any ``extra={...}`` fields are
appended to the message as ``key=value`` pairs.
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


_run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("nicherank_run_id", default="-")
_step_var: contextvars.ContextVar[str] = contextvars.ContextVar("nicherank_step", default="-")

# Attributes every LogRecord has; anything else on a record came from ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "run_id",
    "step",
}


class _ContextFilter(logging.Filter):
    """Inject run context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.run_id = _run_id_var.get()  # type: ignore[attr-defined]
        record.step = _step_var.get()  # type: ignore[attr-defined]
        return True


class _StructuredFormatter(logging.Formatter):
    """Append ``extra`` fields to the formatted message."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        text = super().format(record)
        fields = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}
        if not fields:
            return text
        return text + " | " + " ".join(f"{k}={v!r}" for k, v in fields.items())


@contextlib.contextmanager
def run_context(*, run_id: str, step: str | None = None) -> Any:
    """Bind a run id (and optionally a step) for every record logged inside the block."""

    token_run = _run_id_var.set(run_id)
    token_step = _step_var.set(step or _step_var.get())
    try:
        yield
    finally:
        _run_id_var.reset(token_run)
        _step_var.reset(token_step)


def set_step(step: str) -> None:
    _step_var.set(step)


def configure_logging(level: str = "INFO") -> None:
    """Install the rich handler on the root logger. Safe to call more than once.

    Args:
        level: Logging level name.
    """

    formatter = _StructuredFormatter(fmt="run=%(run_id)s step=%(step)s %(name)s: %(message)s")

    root = logging.getLogger()
    root.setLevel(level)
    handlers = [h for h in root.handlers if isinstance(h, RichHandler)]
    if not handlers:
        # stderr keeps `--json` output on stdout clean
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_level=True)
        root.addHandler(handler)
        handlers = [handler]

    for h in handlers:
        if not any(isinstance(f, _ContextFilter) for f in h.filters):
            h.addFilter(_ContextFilter())
        h.setFormatter(formatter)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log the active exception with ``context`` as structured fields."""

    logger.exception(msg, extra=context)
