"""
Module: invoice_engines.aging
Responsibility:
    Describe how close an invoice is to (or how far past) its due date,
    in calendar days, for worklists and detail panels.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Purity: ``as_of`` is always passed in by the caller.
    - Calendar days are counted on UTC dates.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from invoice_kernel.domain.coercion import parse_timestamp
from invoice_kernel.domain.invoice import Invoice
from invoice_kernel.logging_config import get_logger

logger = get_logger("engines.aging")

DEFAULT_DUE_SOON_DAYS = 3


class AgingTone(str, Enum):
    """Urgency band of an invoice's due date."""

    NO_DUE_DATE = "NO_DUE_DATE"
    ON_TRACK = "ON_TRACK"
    DUE_SOON = "DUE_SOON"
    OVERDUE = "OVERDUE"


@dataclass(frozen=True)
class DueDateAging:
    """
    Due-date position of one invoice.

    ``days_until_due`` is positive before the due date, zero on it and
    negative after it; ``None`` when the invoice has no usable due date.
    """

    days_until_due: int | None
    tone: AgingTone
    label: str

    @property
    def days_overdue(self) -> int:
        if self.days_until_due is None:
            return 0
        return max(0, -self.days_until_due)


def _plural_days(count: int) -> str:
    return f"{count} day{'' if count == 1 else 's'}"


def calendar_days_until(due: datetime | date, as_of: datetime | date) -> int:
    """Whole calendar days from ``as_of`` to ``due`` (UTC dates)."""
    due_day = parse_timestamp(due).date()
    as_of_day = parse_timestamp(as_of).date()
    return (due_day - as_of_day).days


def describe_due_date_aging(
    invoice: Invoice,
    as_of: datetime | date,
    due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
) -> DueDateAging:
    """
    Classify ``invoice`` by the calendar days left until its due date.

    Returns:
        DueDateAging with tone OVERDUE (past due), DUE_SOON (due today or
        within ``due_soon_days``), ON_TRACK, or NO_DUE_DATE.
    """
    due_at = parse_timestamp(invoice.due_at)
    if due_at is None:
        return DueDateAging(None, AgingTone.NO_DUE_DATE, "No due date")

    days = calendar_days_until(due_at, as_of)

    if days > 0:
        tone = AgingTone.DUE_SOON if days <= due_soon_days else AgingTone.ON_TRACK
        aging = DueDateAging(days, tone, f"{_plural_days(days)} remaining")
    elif days == 0:
        aging = DueDateAging(0, AgingTone.DUE_SOON, "Due today")
    else:
        aging = DueDateAging(days, AgingTone.OVERDUE, f"{_plural_days(-days)} overdue")

    logger.debug("due_date_aging_described", extra={
        "invoice_id": invoice.id,
        "due_at": due_at,
        "days_until_due": days,
        "tone": aging.tone,
    })
    return aging
