"""
Module: invoice_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    invoice calculation engines.  This is the canonical import surface
    for rendering and reporting callers.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import invoice_kernel (and sibling engine modules).
    MUST NOT import invoice_ingestion or invoice_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()``; callers pass ``now``
      or a ``Clock``.
    - Decimal-only arithmetic for all monetary amounts.
    - Determinism: identical inputs always produce identical outputs.
    - ``compute_invoice_financials`` and ``resolve_invoice_status`` never
      raise on malformed numbers or dates.

Usage:
    from invoice_engines import compute_invoice_financials, resolve_invoice_status

    financials = compute_invoice_financials(invoice)
    status = resolve_invoice_status(invoice, now, balance=financials.balance)
"""

from invoice_engines.aging import (
    AgingTone,
    DueDateAging,
    calendar_days_until,
    describe_due_date_aging,
)
from invoice_engines.financials import InvoiceFinancials, compute_invoice_financials
from invoice_engines.payments import suggest_payment_amount, validate_payment_amount
from invoice_engines.portfolio import (
    DEFAULT_STATUS_ORDER,
    DerivedInvoice,
    PortfolioSummary,
    count_by_derived_status,
    derive,
    filter_by_derived_status,
    sort_worklist,
    summarize_portfolio,
)
from invoice_engines.status import resolve_invoice_status

__all__ = [
    # Financial aggregation
    "InvoiceFinancials",
    "compute_invoice_financials",
    # Status resolution
    "resolve_invoice_status",
    # Aging
    "AgingTone",
    "DueDateAging",
    "calendar_days_until",
    "describe_due_date_aging",
    # Portfolio
    "DEFAULT_STATUS_ORDER",
    "DerivedInvoice",
    "PortfolioSummary",
    "derive",
    "summarize_portfolio",
    "count_by_derived_status",
    "filter_by_derived_status",
    "sort_worklist",
    # Payments
    "suggest_payment_amount",
    "validate_payment_amount",
]
