"""
JSON source adapter for invoice records.

Accepts either a JSON array of invoice objects or an object holding the
array under ``invoices`` (the shape of a data-API export).  Numbers are
parsed as ``Decimal`` so stored totals never pass through ``float``.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from invoice_kernel.exceptions import InvoiceRecordError
from invoice_kernel.logging_config import get_logger
from invoice_ingestion.mapping.engine import InvoiceMappingResult, map_invoice_records

logger = get_logger("ingestion.json")


def read_invoice_records(source_path: Path, encoding: str = "utf-8") -> list[Any]:
    """
    Read raw invoice records from ``source_path``.

    Raises:
        FileNotFoundError: the file does not exist.
        json.JSONDecodeError: the file is not valid JSON.
        InvoiceRecordError: the document holds no invoice array.
    """
    source_path = Path(source_path)
    with source_path.open("r", encoding=encoding) as f:
        data = json.load(f, parse_float=Decimal)

    if isinstance(data, dict):
        data = data.get("invoices")
    if not isinstance(data, list):
        raise InvoiceRecordError(
            f"{source_path.name} does not contain an invoice array",
            field="invoices",
        )

    logger.debug("invoice_records_read", extra={
        "source": str(source_path),
        "record_count": len(data),
    })
    return data


def load_invoice_records(source_path: Path, encoding: str = "utf-8") -> InvoiceMappingResult:
    """Read and map every invoice record in ``source_path``."""
    return map_invoice_records(read_invoice_records(source_path, encoding))
