"""
Engine settings schema.

YAML files are parsed into these frozen types by ``invoice_config.loader``
and checked by ``invoice_config.validator``.  The engines never read them
directly; callers pass the relevant values as arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from invoice_kernel.domain.invoice import InvoiceStatus


@dataclass(frozen=True)
class ReportingSettings:
    """Parameters of the receivables views built on the engines."""

    collection_window_days: int = 30
    due_soon_days: int = 3
    status_order: tuple[InvoiceStatus, ...] = (
        InvoiceStatus.OVERDUE,
        InvoiceStatus.SENT,
        InvoiceStatus.DRAFT,
        InvoiceStatus.PAID,
        InvoiceStatus.CANCELLED,
    )


@dataclass(frozen=True)
class EngineSettings:
    """Active invoice engine configuration."""

    currency: str = "GBP"
    reporting: ReportingSettings = field(default_factory=ReportingSettings)
    checksum: str = ""
    source: str | None = None
