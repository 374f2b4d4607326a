"""
Module: invoice_engines.portfolio
Responsibility:
    Aggregate derived invoice figures across a set of invoices: the
    receivables summary (outstanding, overdue exposure, collections),
    status counts, status filtering and worklist ordering.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Composes
    ``financials`` and ``status``; every figure is derived per invoice
    through those two functions, never from stored totals directly.

Invariants enforced:
    - Purity: ``now`` is always passed in by the caller.
    - Every derived status is computed with the invoice's own balance,
      so the aggregator runs once per invoice per call.

Failure modes:
    - ValueError when ``now`` is given but is not a timestamp.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from invoice_kernel.domain.coercion import (
    ZERO,
    lenient_decimal_context,
    parse_timestamp,
    safe_decimal,
)
from invoice_kernel.domain.invoice import Invoice, InvoiceStatus
from invoice_kernel.logging_config import get_logger, log_context
from invoice_engines.financials import InvoiceFinancials, compute_invoice_financials
from invoice_engines.status import resolve_invoice_status, resolve_now
from invoice_engines.tracer import traced_engine

logger = get_logger("engines.portfolio")

DEFAULT_COLLECTION_WINDOW_DAYS = 30

DEFAULT_STATUS_ORDER: tuple[InvoiceStatus, ...] = (
    InvoiceStatus.OVERDUE,
    InvoiceStatus.SENT,
    InvoiceStatus.DRAFT,
    InvoiceStatus.PAID,
    InvoiceStatus.CANCELLED,
)

ALL_STATUSES = "ALL"


@dataclass(frozen=True)
class DerivedInvoice:
    """An invoice paired with its derived financials and status."""

    invoice: Invoice
    financials: InvoiceFinancials
    status: InvoiceStatus | str


@dataclass(frozen=True)
class PortfolioSummary:
    """
    Receivables summary across a set of invoices.

    Guarantees:
        - ``outstanding`` and ``overdue_exposure`` are sums of
          non-negative balances.
        - ``collection_rate`` is a whole percentage, 0 when nothing
          was billed.
    """

    invoice_count: int
    total_billed: Decimal
    total_collected: Decimal
    outstanding: Decimal
    overdue_exposure: Decimal
    draft_count: int
    paid_in_window: Decimal
    collection_rate: int


def derive(invoice: Invoice, now: datetime) -> DerivedInvoice:
    """Run both engines once for ``invoice``."""
    with log_context(invoice_id=invoice.id):
        financials = compute_invoice_financials(invoice)
        status = resolve_invoice_status(invoice, now, balance=financials.balance)
    return DerivedInvoice(invoice=invoice, financials=financials, status=status)


def _add(running: Decimal, amount: Decimal) -> Decimal:
    # An overflowing sum degrades to zero, as in the aggregator.
    with lenient_decimal_context():
        return safe_decimal(running + amount)


def _collection_rate(collected: Decimal, billed: Decimal) -> int:
    if billed <= ZERO:
        return 0
    with lenient_decimal_context():
        rate = safe_decimal((collected / billed) * 100)
    return int(rate.to_integral_value(rounding=ROUND_HALF_UP))


@traced_engine(
    "invoice_portfolio", "1.0",
    fingerprint_fields=("invoices", "now", "collection_window_days"),
)
def summarize_portfolio(
    invoices: Sequence[Invoice],
    now: datetime | None = None,
    collection_window_days: int = DEFAULT_COLLECTION_WINDOW_DAYS,
) -> PortfolioSummary:
    """
    Summarise receivables for ``invoices`` as of ``now``.

    ``paid_in_window`` sums payments dated on or after
    ``now - collection_window_days``; undated payments are skipped.
    """
    t0 = time.monotonic()
    reference = resolve_now(now)
    window_start = reference - timedelta(days=collection_window_days)

    total_billed = ZERO
    total_collected = ZERO
    outstanding = ZERO
    overdue_exposure = ZERO
    paid_in_window = ZERO
    draft_count = 0

    for invoice in invoices:
        derived = derive(invoice, reference)
        financials = derived.financials
        stored = InvoiceStatus.parse(invoice.status)

        total_billed = _add(total_billed, financials.total)
        total_collected = _add(total_collected, financials.amount_paid)

        if stored is InvoiceStatus.DRAFT:
            draft_count += 1
        if stored is not InvoiceStatus.CANCELLED and financials.balance > ZERO:
            outstanding = _add(outstanding, financials.balance)
        if derived.status == InvoiceStatus.OVERDUE:
            overdue_exposure = _add(overdue_exposure, financials.balance)

        for payment in financials.payments:
            paid_on = parse_timestamp(payment.date)
            if paid_on is not None and paid_on >= window_start:
                paid_in_window = _add(paid_in_window, safe_decimal(payment.amount))

    summary = PortfolioSummary(
        invoice_count=len(invoices),
        total_billed=total_billed,
        total_collected=total_collected,
        outstanding=outstanding,
        overdue_exposure=overdue_exposure,
        draft_count=draft_count,
        paid_in_window=paid_in_window,
        collection_rate=_collection_rate(total_collected, total_billed),
    )

    logger.info("portfolio_summarized", extra={
        "invoice_count": summary.invoice_count,
        "outstanding": summary.outstanding,
        "overdue_exposure": summary.overdue_exposure,
        "collection_rate": summary.collection_rate,
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return summary


def count_by_derived_status(
    invoices: Sequence[Invoice],
    now: datetime | None = None,
) -> dict[InvoiceStatus | str, int]:
    """
    Count invoices per derived status.

    Every ``InvoiceStatus`` is present (zero-filled); the total is under
    ``"ALL"``.  Unrecognised stored statuses get their own key.
    """
    reference = resolve_now(now)
    counts: dict[InvoiceStatus | str, int] = {status: 0 for status in InvoiceStatus}
    for invoice in invoices:
        status = derive(invoice, reference).status
        counts[status] = counts.get(status, 0) + 1
    counts[ALL_STATUSES] = len(invoices)
    return counts


def filter_by_derived_status(
    invoices: Iterable[Invoice],
    status: InvoiceStatus | str | None,
    now: datetime | None = None,
) -> tuple[Invoice, ...]:
    """Keep invoices whose derived status is ``status``; ``None`` or "ALL" keeps all."""
    invoices = tuple(invoices)
    if status is None or status == ALL_STATUSES:
        return invoices
    wanted = InvoiceStatus.parse(status) or status
    reference = resolve_now(now)
    return tuple(
        inv for inv in invoices if derive(inv, reference).status == wanted
    )


def sort_worklist(
    invoices: Iterable[Invoice],
    now: datetime | None = None,
    status_order: Sequence[InvoiceStatus] = DEFAULT_STATUS_ORDER,
) -> tuple[Invoice, ...]:
    """
    Order invoices for a collections worklist.

    Sort keys, in order:
        1. Derived status rank in ``status_order`` (unlisted last).
        2. Due date ascending, invoices without one last.
        3. Issue date descending, invoices without one treated as oldest.
    """
    reference = resolve_now(now)
    rank = {status: index for index, status in enumerate(status_order)}

    def key(invoice: Invoice) -> tuple:
        status = derive(invoice, reference).status
        due_at = parse_timestamp(invoice.due_at)
        issued_at = parse_timestamp(invoice.issued_at)
        return (
            rank.get(status, len(rank)),
            due_at is None,
            due_at.timestamp() if due_at is not None else 0.0,
            -issued_at.timestamp() if issued_at is not None else float("inf"),
        )

    return tuple(sorted(invoices, key=key))
