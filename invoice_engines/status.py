"""
Module: invoice_engines.status
Responsibility:
    Derive the effective (display) status of an invoice from its stored
    status, its computed balance and its due date relative to ``now``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Depends on
    ``invoice_engines.financials`` for the balance.

Invariants enforced:
    - CANCELLED and DRAFT are returned unchanged whatever the balance or
      due date.
    - A stored PAID is returned unchanged even when the balance math
      disagrees.
    - SENT <-> OVERDUE is a display derivation recomputed on every call;
      nothing is persisted.
    - Purity: the wall clock is only read through an injected ``Clock``
      when the caller does not supply ``now``.

Failure modes:
    - None.  An unparseable due date counts as no due date; an unparseable
      ``now`` is logged and the overdue check is skipped (the wall clock
      is never substituted for a value the caller supplied).

Usage:
    from invoice_engines.status import resolve_invoice_status

    status = resolve_invoice_status(invoice, now=datetime(2024, 2, 1, tzinfo=UTC))
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from invoice_kernel.domain.clock import Clock, SystemClock
from invoice_kernel.domain.coercion import ZERO, parse_timestamp, safe_decimal
from invoice_kernel.domain.invoice import Invoice, InvoiceStatus
from invoice_kernel.logging_config import get_logger
from invoice_engines.financials import compute_invoice_financials
from invoice_engines.tracer import traced_engine

logger = get_logger("engines.status")

_OVERDUE_ELIGIBLE = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


def resolve_now(now: datetime | None = None, clock: Clock | None = None) -> datetime:
    """
    Return ``now`` as a UTC-aware datetime, reading ``clock`` only when
    ``now`` is None.

    Raises:
        ValueError: ``now`` was given but is not a timestamp.
    """
    if now is None:
        return parse_timestamp((clock or SystemClock()).now())
    reference = parse_timestamp(now)
    if reference is None:
        raise ValueError(f"now is not a timestamp: {now!r}")
    return reference


def _status_reference_time(
    invoice: Invoice, now: datetime | None, clock: Clock | None
) -> datetime | None:
    try:
        return resolve_now(now, clock)
    except ValueError:
        logger.warning("invoice_status_now_unparseable", extra={
            "invoice_id": invoice.id,
            "now": str(now),
        })
        return None


@traced_engine("invoice_status", "1.0", fingerprint_fields=("invoice", "now", "balance"))
def resolve_invoice_status(
    invoice: Invoice,
    now: datetime | None = None,
    *,
    balance: Decimal | None = None,
    clock: Clock | None = None,
) -> InvoiceStatus | str:
    """
    Resolve the effective status of ``invoice``; first match wins.

    1. CANCELLED, DRAFT and PAID stored statuses are returned as-is.
    2. A balance of zero or less means PAID.
    3. SENT or OVERDUE with a valid due date strictly before ``now``
       means OVERDUE.
    4. Otherwise the stored status is returned unchanged.

    Args:
        invoice: Invoice snapshot.
        now: Reference time; naive values are taken as UTC.  An
            unparseable value is logged and no OVERDUE is derived.
        balance: Balance already computed by ``compute_invoice_financials``
            for this snapshot.  Computed here when omitted.
        clock: Time source used only when ``now`` is omitted.
    """
    stored = InvoiceStatus.parse(invoice.status)

    if stored is not None and (stored.is_terminal or stored is InvoiceStatus.DRAFT):
        return stored

    if balance is None:
        balance = compute_invoice_financials(invoice).balance
    else:
        balance = safe_decimal(balance)

    if balance <= ZERO:
        logger.debug("invoice_status_derived_paid", extra={
            "invoice_id": invoice.id,
            "stored_status": invoice.status,
        })
        return InvoiceStatus.PAID

    due_at = parse_timestamp(invoice.due_at)
    if stored in _OVERDUE_ELIGIBLE and due_at is not None:
        reference = _status_reference_time(invoice, now, clock)
        if reference is not None and due_at < reference:
            if stored is InvoiceStatus.SENT:
                logger.debug("invoice_status_derived_overdue", extra={
                    "invoice_id": invoice.id,
                    "due_at": due_at,
                    "now": reference,
                    "balance": balance,
                })
            return InvoiceStatus.OVERDUE

    return stored if stored is not None else invoice.status
