"""Structural validation of parsed engine settings."""

from __future__ import annotations

import re

from invoice_kernel.domain.invoice import InvoiceStatus
from invoice_config.schema import EngineSettings

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def validate_settings(settings: EngineSettings) -> list[str]:
    """Return a list of problems; empty when ``settings`` is usable."""
    errors: list[str] = []
    reporting = settings.reporting

    if not _CURRENCY_CODE.match(settings.currency):
        errors.append(f"currency must be a three-letter ISO 4217 code, got {settings.currency!r}")

    if reporting.collection_window_days <= 0:
        errors.append("reporting.collection_window_days must be positive")

    if reporting.due_soon_days < 0:
        errors.append("reporting.due_soon_days must not be negative")

    order = reporting.status_order
    if len(order) != len(set(order)):
        errors.append("reporting.status_order lists a status more than once")
    missing = [s.value for s in InvoiceStatus if s not in order]
    if missing:
        errors.append(f"reporting.status_order is missing {', '.join(missing)}")

    return errors
