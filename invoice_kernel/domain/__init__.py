"""
Pure domain layer.

Immutable invoice snapshot types and the coercion helpers the engines
use on every read, with NO dependencies on I/O or wall-clock time
(``SystemClock`` aside).
"""

from invoice_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from invoice_kernel.domain.coercion import ZERO, parse_timestamp, safe_decimal
from invoice_kernel.domain.invoice import (
    Invoice,
    InvoiceLineItem,
    InvoicePayment,
    InvoiceStatus,
    PaymentMethod,
)

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
    # Coercion
    "ZERO",
    "safe_decimal",
    "parse_timestamp",
    # Invoice snapshot
    "Invoice",
    "InvoiceLineItem",
    "InvoicePayment",
    "InvoiceStatus",
    "PaymentMethod",
]
