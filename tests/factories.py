"""Builders for invoice snapshots used across the test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from itertools import count
from typing import Any

from invoice_kernel.domain.invoice import (
    Invoice,
    InvoiceLineItem,
    InvoicePayment,
    InvoiceStatus,
    PaymentMethod,
)

_payment_ids = count(1)


def dt(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=UTC)


def _dec(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Decimal(str(value))
    return value


def make_line_item(
    quantity: Any = 1,
    unit_price: Any = 0,
    item_id: str = "item-1",
    description: str = "Service",
    amount: Any = None,
) -> InvoiceLineItem:
    return InvoiceLineItem(
        id=item_id,
        description=description,
        quantity=_dec(quantity),
        unit_price=_dec(unit_price),
        amount=_dec(amount),
    )


def make_payment(
    amount: Any = 0,
    date: datetime | None = None,
    payment_id: str | None = None,
    invoice_id: str = "inv-1",
    method: PaymentMethod = PaymentMethod.BANK_TRANSFER,
) -> InvoicePayment:
    return InvoicePayment(
        id=payment_id or f"payment-{next(_payment_ids)}",
        invoice_id=invoice_id,
        amount=_dec(amount),
        date=date or dt(2024, 1, 10),
        method=method,
        created_by="user-1",
        created_at=date or dt(2024, 1, 10),
    )


_DEFAULT = object()


def make_invoice(
    line_items: Any = _DEFAULT,
    payments: tuple[InvoicePayment, ...] | list[InvoicePayment] = (),
    status: InvoiceStatus | str = InvoiceStatus.DRAFT,
    invoice_id: str = "inv-1",
    issued_at: Any = _DEFAULT,
    due_at: Any = _DEFAULT,
    **stored: Any,
) -> Invoice:
    """
    Build an invoice; defaults to one line item of 1 x 100, issued
    2024-01-01 and due 2024-02-01.  Stored totals are passed as keyword
    arguments (``subtotal=500``, ``balance=150``...).
    """
    if line_items is _DEFAULT:
        line_items = (make_line_item(1, 100, item_id="item-default", amount=100),)
    return Invoice(
        id=invoice_id,
        invoice_number=f"INV-{invoice_id}",
        client_id="client-1",
        project_id="project-1",
        status=status,
        issued_at=dt(2024, 1, 1) if issued_at is _DEFAULT else issued_at,
        due_at=dt(2024, 2, 1) if due_at is _DEFAULT else due_at,
        line_items=tuple(line_items),
        payments=tuple(payments),
        **{key: _dec(value) for key, value in stored.items()},
    )
