"""
invoice_ingestion -- Boundary between the data API and the invoice engines.

Translates raw, camelCase, alias-carrying invoice records into the
canonical ``invoice_kernel.domain.invoice.Invoice`` snapshot.

Architecture:
    invoice_ingestion/ is a top-level package. Nothing in invoice_kernel/
    or invoice_engines/ imports from ingestion.
"""

from invoice_ingestion.adapters import load_invoice_records, read_invoice_records
from invoice_ingestion.mapping import (
    InvoiceMappingResult,
    RejectedRecord,
    map_invoice_record,
    map_invoice_records,
)

__all__ = [
    "map_invoice_record",
    "map_invoice_records",
    "InvoiceMappingResult",
    "RejectedRecord",
    "load_invoice_records",
    "read_invoice_records",
]
