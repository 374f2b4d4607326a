"""
Invoice -- canonical, alias-free invoice snapshot types.

Responsibility:
    Immutable records consumed by the invoice engines.  The data API
    carries historical field aliases (``dueAt``/``dueDate``,
    ``issuedAt``/``issueDate``, ``unitPrice``/``rate``); those are
    resolved once in ``invoice_ingestion`` and never appear here.

Architecture position:
    Kernel > Domain -- pure data, zero I/O.

Invariants enforced:
    - Records are frozen; collections are tuples.
    - Stored totals are ``Decimal`` or ``None``.  ``None`` means the
      field was absent from the record, which the aggregator treats
      differently from a stored zero (see ``Invoice.balance``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from invoice_kernel.domain.coercion import ZERO, lenient_decimal_context, safe_decimal


class InvoiceStatus(str, Enum):
    """Lifecycle status of an invoice, as stored or as derived for display."""

    DRAFT = "Draft"
    SENT = "Sent"
    OVERDUE = "Overdue"
    PAID = "Paid"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value: Any) -> InvoiceStatus | None:
        """Match a member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().upper()
        for member in cls:
            if key in (member.name, member.value.upper()):
                return member
        return None

    @property
    def is_terminal(self) -> bool:
        return self in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "BANK_TRANSFER"
    CREDIT_CARD = "CREDIT_CARD"
    CASH = "CASH"
    CHECK = "CHECK"

    @classmethod
    def parse(cls, value: Any) -> PaymentMethod | None:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().upper().replace(" ", "_")
        if key == "CHEQUE":
            key = "CHECK"
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class InvoiceLineItem:
    """
    One billable ``quantity x unit_price`` entry.

    ``amount`` is the precomputed total persisted with the item; it may
    be stale and is never used by the aggregator.
    """

    id: str
    description: str
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal | None = None

    @property
    def line_total(self) -> Decimal:
        """``quantity x unit_price``; zero when either is malformed or the product overflows."""
        with lenient_decimal_context():
            return safe_decimal(safe_decimal(self.quantity) * safe_decimal(self.unit_price))


@dataclass(frozen=True)
class InvoicePayment:
    """One settlement event against an invoice. Payments are append-only."""

    id: str
    invoice_id: str
    amount: Decimal
    date: datetime | None = None
    method: PaymentMethod | None = None
    reference: str | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Invoice:
    """
    Invoice aggregate snapshot.

    Contract:
        Read-only view of an invoice as returned by the data API, with
        field aliases resolved.  The stored totals (``subtotal`` through
        ``balance``) may disagree with what ``line_items`` and
        ``payments`` would compute; reconciling them is the job of
        ``invoice_engines.financials``.
    """

    id: str
    status: InvoiceStatus | str = InvoiceStatus.DRAFT
    invoice_number: str = ""
    client_id: str | None = None
    project_id: str | None = None
    issued_at: datetime | None = None
    due_at: datetime | None = None
    line_items: tuple[InvoiceLineItem, ...] = ()
    payments: tuple[InvoicePayment, ...] = ()
    subtotal: Decimal | None = None
    tax_rate: Decimal | None = None
    tax_amount: Decimal | None = None
    retention_rate: Decimal | None = None
    retention_amount: Decimal | None = None
    total: Decimal | None = None
    amount_paid: Decimal | None = None
    # None: no stored balance. A stored zero is authoritative.
    balance: Decimal | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_line_items(self) -> bool:
        return bool(self.line_items)

    @property
    def payments_total(self) -> Decimal:
        """Sum of recorded payment amounts; zero if the sum overflows."""
        with lenient_decimal_context():
            return safe_decimal(sum((safe_decimal(p.amount) for p in self.payments or ()), ZERO))
