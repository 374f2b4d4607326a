"""
Module: invoice_engines.financials
Responsibility:
    Derive an invoice's subtotal, tax, retention, total, amount paid and
    outstanding balance from its line items, payments and previously
    stored totals.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import invoice_kernel.domain (and sibling engine modules).

Invariants enforced:
    - ``balance >= 0`` for every input, including overpaid invoices.
    - Line items, when present, are the source of truth for subtotal,
      tax, retention and total; stored totals are only a fallback.
    - ``amount_paid`` is the largest of the stored ``amount_paid``, the
      sum of recorded payments and (without line items) the amount
      implied by a stored balance.  Any single source may under-report
      after a data migration; see DESIGN.md before changing this.
    - Every numeric read is coerced with ``safe_decimal``; no NaN or
      None reaches the arithmetic.  Arithmetic that overflows the
      decimal context degrades to zero like any other malformed value.

Failure modes:
    - None.  Malformed values degrade to zero; the function never raises.

Usage:
    from invoice_engines.financials import compute_invoice_financials

    financials = compute_invoice_financials(invoice)
    financials.balance  # Decimal("125.0")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from invoice_kernel.domain.coercion import ZERO, lenient_decimal_context, safe_decimal
from invoice_kernel.domain.invoice import Invoice, InvoicePayment
from invoice_kernel.logging_config import get_logger
from invoice_engines.tracer import traced_engine

logger = get_logger("engines.financials")


@dataclass(frozen=True)
class InvoiceFinancials:
    """
    Derived money figures for one invoice snapshot.

    Guarantees:
        - ``balance >= 0``.
        - ``amount_paid >= 0``.
        - ``payments`` is the invoice's own payments tuple, in its
          original order.
    """

    subtotal: Decimal
    tax_amount: Decimal
    retention_amount: Decimal
    total: Decimal
    amount_paid: Decimal
    balance: Decimal
    payments: tuple[InvoicePayment, ...] = ()

    @property
    def is_settled(self) -> bool:
        return self.balance <= ZERO

    @property
    def is_overpaid(self) -> bool:
        return self.amount_paid > self.total


def _prefer_stored(stored: Decimal, computed: Decimal, has_line_items: bool) -> Decimal:
    # A stored zero counts as absent.
    if has_line_items or not stored:
        return computed
    return stored


@traced_engine("invoice_financials", "1.0", fingerprint_fields=("invoice",))
def compute_invoice_financials(invoice: Invoice) -> InvoiceFinancials:
    """
    Compute the financial figures of ``invoice``.

    Postconditions:
        - With line items: ``subtotal = sum(quantity x unit_price)``,
          ``tax_amount = subtotal x tax_rate``,
          ``retention_amount = subtotal x retention_rate``,
          ``total = subtotal + tax_amount - retention_amount``.
        - Without line items: each of those figures is the stored value
          when it is non-zero, else the computed one.
        - ``balance = max(0, total - amount_paid)``, except that a stored
          balance on an invoice without line items is trusted, capped at
          ``max(0, total)``.
    """
    line_items = invoice.line_items or ()
    has_line_items = len(line_items) > 0
    payments = invoice.payments or ()

    # Every intermediate is re-coerced: an overflow becomes zero, never an exception.
    with lenient_decimal_context():
        computed_subtotal = safe_decimal(sum((item.line_total for item in line_items), ZERO))
        subtotal = _prefer_stored(
            safe_decimal(invoice.subtotal), computed_subtotal, has_line_items
        )

        tax_rate = safe_decimal(invoice.tax_rate)
        retention_rate = safe_decimal(invoice.retention_rate)

        tax_amount = _prefer_stored(
            safe_decimal(invoice.tax_amount),
            safe_decimal(subtotal * tax_rate),
            has_line_items,
        )
        retention_amount = _prefer_stored(
            safe_decimal(invoice.retention_amount),
            safe_decimal(subtotal * retention_rate),
            has_line_items,
        )
        total = _prefer_stored(
            safe_decimal(invoice.total),
            safe_decimal(subtotal + tax_amount - retention_amount),
            has_line_items,
        )

        paid_from_payments = invoice.payments_total
        recorded_paid = safe_decimal(invoice.amount_paid)

        stored_balance: Decimal | None = None
        if not has_line_items and invoice.balance is not None:
            stored_balance = max(ZERO, safe_decimal(invoice.balance))

        candidates = [recorded_paid, paid_from_payments]
        if stored_balance is not None:
            candidates.append(max(ZERO, safe_decimal(total - stored_balance)))

        amount_paid = max(ZERO, *candidates)
        computed_balance = max(ZERO, safe_decimal(total - amount_paid))

        if stored_balance is not None:
            balance = min(stored_balance, max(ZERO, total))
        else:
            balance = computed_balance

    logger.debug("invoice_financials_computed", extra={
        "invoice_id": invoice.id,
        "has_line_items": has_line_items,
        "line_item_count": len(line_items),
        "payment_count": len(payments),
        "total": total,
        "amount_paid": amount_paid,
        "balance": balance,
        "used_stored_balance": stored_balance is not None,
    })

    if balance != computed_balance:
        logger.debug("invoice_stored_balance_diverges", extra={
            "invoice_id": invoice.id,
            "stored_balance": balance,
            "computed_balance": computed_balance,
        })

    return InvoiceFinancials(
        subtotal=subtotal,
        tax_amount=tax_amount,
        retention_amount=retention_amount,
        total=total,
        amount_paid=amount_paid,
        balance=balance,
        payments=payments,
    )
