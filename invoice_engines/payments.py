"""
Module: invoice_engines.payments
Responsibility:
    Pre-checks for recording a payment against an invoice: the amount
    to suggest and the validation of an amount a user entered.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Recording the payment
    is the data collaborator's job; this module only decides whether the
    amount is acceptable against the derived balance.

Failure modes:
    - InvalidPaymentAmountError for zero, negative or non-numeric amounts.
    - PaymentExceedsBalanceError when the amount exceeds the balance.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from invoice_kernel.domain.coercion import ZERO, lenient_decimal_context
from invoice_kernel.domain.invoice import Invoice
from invoice_kernel.exceptions import (
    InvalidPaymentAmountError,
    PaymentExceedsBalanceError,
)
from invoice_kernel.logging_config import get_logger
from invoice_engines.financials import compute_invoice_financials

logger = get_logger("engines.payments")

_TWO_PLACES = Decimal("0.01")


def suggest_payment_amount(invoice: Invoice) -> Decimal:
    """
    Outstanding balance rounded to cents; zero when settled.

    A balance with more digits than the decimal context can hold at
    cent precision is returned unrounded.
    """
    balance = compute_invoice_financials(invoice).balance
    with lenient_decimal_context():
        suggested = balance.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return suggested if suggested.is_finite() else balance


def _parse_amount(invoice_id: str, amount: Any) -> Decimal:
    if isinstance(amount, bool) or amount is None:
        raise InvalidPaymentAmountError(invoice_id, amount)
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise InvalidPaymentAmountError(invoice_id, amount) from exc
    if not value.is_finite() or value <= ZERO:
        raise InvalidPaymentAmountError(invoice_id, amount)
    return value


def validate_payment_amount(invoice: Invoice, amount: Any) -> Decimal:
    """
    Validate a proposed payment against ``invoice``.

    Unlike the derivation engines, this is an input check for a write
    and raises instead of coercing.

    Returns:
        The amount as a ``Decimal``.

    Raises:
        InvalidPaymentAmountError: amount is not a positive number.
        PaymentExceedsBalanceError: amount is larger than the balance.
    """
    value = _parse_amount(invoice.id, amount)
    balance = compute_invoice_financials(invoice).balance

    if value > balance:
        logger.warning("payment_exceeds_balance", extra={
            "invoice_id": invoice.id,
            "amount": value,
            "balance": balance,
        })
        raise PaymentExceedsBalanceError(invoice.id, value, balance)

    logger.debug("payment_amount_validated", extra={
        "invoice_id": invoice.id,
        "amount": value,
        "remaining_balance": balance - value,
    })
    return value
