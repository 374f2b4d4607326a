"""Source adapters for invoice records (file I/O only)."""

from invoice_ingestion.adapters.json_adapter import load_invoice_records, read_invoice_records

__all__ = [
    "load_invoice_records",
    "read_invoice_records",
]
