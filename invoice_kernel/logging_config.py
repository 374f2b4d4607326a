"""
Structured JSON logging for the invoice engines.

Each record is written as one JSON object per line.  Fields bound with
``log_context`` are merged into every record emitted inside the block:

    correlation_id  one report or import run
    invoice_id      the invoice being derived
    record_index    position of the raw record in an import batch

Fields passed through ``extra=`` take precedence over bound ones.
"""

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any, TextIO

LOGGER_NAMESPACE = "invoice_kernel"

CONTEXT_FIELDS = frozenset({"correlation_id", "invoice_id", "record_index"})

_bound: ContextVar[dict[str, Any]] = ContextVar("invoice_log_context")


@contextmanager
def log_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """
    Bind context fields for the duration of the block.

    Nested blocks extend the enclosing fields; passing ``None`` for a
    field hides it until the block exits.

    Raises:
        TypeError: a field name outside ``CONTEXT_FIELDS``.
    """
    unknown = set(fields) - CONTEXT_FIELDS
    if unknown:
        raise TypeError(f"unknown log context fields: {sorted(unknown)}")
    merged = {
        key: value
        for key, value in {**_bound.get({}), **fields}.items()
        if value is not None
    }
    token = _bound.set(merged)
    try:
        yield dict(merged)
    finally:
        _bound.reset(token)


def current_log_context() -> dict[str, Any]:
    """Fields bound in the current context."""
    return dict(_bound.get({}))


def clear_log_context() -> None:
    _bound.set({})


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    # Decimal amounts, UUIDs and anything else: their text form.
    return str(value)


_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _error_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {"error_type": type(exc).__name__, "error": str(exc)}
    code = getattr(exc, "code", None)
    if code is not None:
        fields["error_code"] = code
    # InvoiceKernelError subclasses keep the offending values as attributes.
    for key, value in vars(exc).items():
        if not key.startswith("_"):
            fields[f"error_{key}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **current_log_context(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        )
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_error_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``invoice_kernel`` namespace."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_installed: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> logging.Handler:
    """
    Send invoice logs to ``handler`` (default: a stream handler on stderr).

    Only the first call installs a handler; later calls return the one
    already installed until ``reset_logging`` removes it.
    """
    global _installed
    if _installed is not None:
        return _installed

    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())

    namespace = logging.getLogger(LOGGER_NAMESPACE)
    namespace.setLevel(level)
    namespace.propagate = False
    namespace.addHandler(handler)
    _installed = handler
    return handler


def reset_logging() -> None:
    """Remove the handler installed by ``configure_logging``. Test use."""
    global _installed
    namespace = logging.getLogger(LOGGER_NAMESPACE)
    if _installed is not None:
        namespace.removeHandler(_installed)
        _installed = None
    namespace.setLevel(logging.WARNING)
