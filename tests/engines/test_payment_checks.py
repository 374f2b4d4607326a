"""
Tests for payment pre-checks against the derived balance.
"""

from decimal import Decimal

import pytest

from invoice_engines.payments import suggest_payment_amount, validate_payment_amount
from invoice_kernel.exceptions import (
    InvalidPaymentAmountError,
    PaymentError,
    PaymentExceedsBalanceError,
)
from tests.factories import make_invoice, make_line_item, make_payment


class TestSuggestPaymentAmount:

    def test_suggests_outstanding_balance(self):
        invoice = make_invoice(payments=[make_payment(40)])

        assert suggest_payment_amount(invoice) == Decimal("60.00")

    def test_rounds_to_cents(self):
        invoice = make_invoice(line_items=[make_line_item(3, "33.335")])

        assert suggest_payment_amount(invoice) == Decimal("100.01")

    def test_settled_invoice_suggests_zero(self):
        invoice = make_invoice(payments=[make_payment(150)])

        assert suggest_payment_amount(invoice) == Decimal("0.00")


class TestValidatePaymentAmount:

    @pytest.mark.parametrize("amount", ["60", 60, Decimal("60.00"), " 59.99 "])
    def test_accepts_amount_within_balance(self, amount):
        invoice = make_invoice(payments=[make_payment(40)])

        assert validate_payment_amount(invoice, amount) == Decimal(str(amount).strip())

    @pytest.mark.parametrize("amount", [0, "-5", "abc", "", None, True, "NaN", "Infinity"])
    def test_rejects_non_positive_or_non_numeric(self, amount):
        with pytest.raises(InvalidPaymentAmountError) as exc_info:
            validate_payment_amount(make_invoice(), amount)

        assert exc_info.value.code == "INVALID_PAYMENT_AMOUNT"
        assert exc_info.value.invoice_id == "inv-1"

    def test_rejects_amount_over_balance(self, captured_logs):
        invoice = make_invoice(payments=[make_payment(40)])

        with pytest.raises(PaymentExceedsBalanceError) as exc_info:
            validate_payment_amount(invoice, "60.01")

        error = exc_info.value
        assert isinstance(error, PaymentError)
        assert error.code == "PAYMENT_EXCEEDS_BALANCE"
        assert error.amount == Decimal("60.01")
        assert error.balance == Decimal("60")

        warnings = [r for r in captured_logs() if r["message"] == "payment_exceeds_balance"]
        assert warnings and warnings[0]["level"] == "WARNING"

    def test_settled_invoice_rejects_any_payment(self):
        invoice = make_invoice(payments=[make_payment(100)])

        with pytest.raises(PaymentExceedsBalanceError):
            validate_payment_amount(invoice, "0.01")
