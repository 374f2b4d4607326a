"""Mapping engine: pure translation of raw invoice records to canonical snapshots."""

from invoice_ingestion.mapping.engine import (
    InvoiceMappingResult,
    RejectedRecord,
    map_invoice_record,
    map_invoice_records,
    map_line_item,
    map_payment,
)

__all__ = [
    "map_invoice_record",
    "map_invoice_records",
    "map_line_item",
    "map_payment",
    "InvoiceMappingResult",
    "RejectedRecord",
]
