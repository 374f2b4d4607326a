"""
Safe coercion of loosely typed record values.

Invoice records arrive from the data API with numbers that may be
strings, ``None`` or garbage, and with timestamps in more than one
shape.  Every numeric read in the engines goes through
``safe_decimal`` and every date read through ``parse_timestamp``.
Neither function raises.  Arithmetic on coerced values runs inside
``lenient_decimal_context`` so huge but finite inputs (``"1e999999"``)
cannot overflow into an exception.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation, Overflow, localcontext
from typing import Any

ZERO = Decimal("0")


def safe_decimal(value: Any) -> Decimal:
    """
    Coerce ``value`` to a finite ``Decimal``, or ``Decimal("0")``.

    Floats are converted through ``str`` so ``0.1`` becomes
    ``Decimal("0.1")`` rather than its binary expansion.  Booleans are
    not amounts and coerce to zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, int):
        candidate = Decimal(value)
    elif isinstance(value, (float, str)):
        text = str(value).strip()
        if not text:
            return ZERO
        try:
            candidate = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    return candidate if candidate.is_finite() else ZERO


@contextmanager
def lenient_decimal_context() -> Iterator[None]:
    """
    Decimal context in which arithmetic never raises.

    Overflow yields Infinity and invalid operations (``inf - inf``) yield
    NaN; pass results through ``safe_decimal`` to collapse them to zero.
    """
    with localcontext() as ctx:
        ctx.traps[Overflow] = False
        ctx.traps[InvalidOperation] = False
        yield


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse ``value`` into a UTC-aware ``datetime``.

    Accepts ``datetime`` (naive values are taken as UTC), ``date``
    (midnight UTC) and ISO-8601 strings, including a trailing ``Z`` and
    date-only forms.  Returns ``None`` for empty or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _as_utc(parsed)
