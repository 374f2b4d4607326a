"""
Typed exception hierarchy for the invoice kernel.

The financial derivation engines (``invoice_engines.financials`` and
``invoice_engines.status``) never raise on malformed data; they degrade
to safe defaults instead.  The exceptions below belong to the layers
around them: record normalisation, payment pre-checks and configuration
loading.

Every exception carries:
  1. A TYPED class (catch by type, not message)
  2. A ``code`` class attribute (machine-readable, API-safe)
  3. Structured attributes for the values that caused it

Hierarchy::

    InvoiceKernelError (base)
    |
    +-- InvoiceRecordError
    |
    +-- PaymentError
    |   +-- InvalidPaymentAmountError
    |   +-- PaymentExceedsBalanceError
    |
    +-- ConfigurationError

Codes:

    INVALID_INVOICE_RECORD   | Raw record cannot be mapped to an Invoice
    INVALID_PAYMENT_AMOUNT   | Payment amount is zero, negative or not a number
    PAYMENT_EXCEEDS_BALANCE  | Payment amount is larger than the open balance
    INVALID_CONFIGURATION    | Engine settings file failed validation

Handling pattern::

    try:
        amount = validate_payment_amount(invoice, form_value)
    except PaymentExceedsBalanceError as e:
        return {"error": e.code, "balance": str(e.balance)}
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class InvoiceKernelError(Exception):
    """
    Base exception for all invoice kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "INVOICE_KERNEL_ERROR"


# Record normalisation


class InvoiceRecordError(InvoiceKernelError):
    """A raw invoice record could not be mapped to the canonical Invoice."""

    code: str = "INVALID_INVOICE_RECORD"

    def __init__(self, reason: str, record_id: Any = None, field: str | None = None):
        self.reason = reason
        self.record_id = record_id
        self.field = field
        where = f" (field {field!r})" if field else ""
        ident = f" for invoice {record_id!r}" if record_id is not None else ""
        super().__init__(f"Invalid invoice record{ident}{where}: {reason}")


# Payments


class PaymentError(InvoiceKernelError):
    """Base exception for payment pre-check failures."""

    code: str = "PAYMENT_ERROR"


class InvalidPaymentAmountError(PaymentError):
    """Payment amount is not a positive number."""

    code: str = "INVALID_PAYMENT_AMOUNT"

    def __init__(self, invoice_id: str, amount: Any):
        self.invoice_id = invoice_id
        self.amount = amount
        super().__init__(
            f"Invalid payment amount for invoice {invoice_id}: {amount!r}"
        )


class PaymentExceedsBalanceError(PaymentError):
    """Payment amount is larger than the outstanding balance."""

    code: str = "PAYMENT_EXCEEDS_BALANCE"

    def __init__(self, invoice_id: str, amount: Decimal, balance: Decimal):
        self.invoice_id = invoice_id
        self.amount = amount
        self.balance = balance
        super().__init__(
            f"Payment of {amount} exceeds outstanding balance {balance} "
            f"on invoice {invoice_id}"
        )


# Configuration


class ConfigurationError(InvoiceKernelError):
    """Engine settings failed validation."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, errors: list[str], source: str | None = None):
        self.errors = list(errors)
        self.source = source
        origin = f" in {source}" if source else ""
        super().__init__(f"Invalid configuration{origin}: {'; '.join(self.errors)}")
