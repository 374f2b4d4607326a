"""
Mapping engine: pure translation from raw data-API invoice records to
canonical ``Invoice`` snapshots. ZERO I/O.

The data API speaks camelCase and still carries aliases from an old
schema migration.  They are resolved here and nowhere else:

    dueAt      ->  dueDate      (first non-empty wins)
    issuedAt   ->  issueDate    (first non-empty wins)
    unitPrice  ?? rate          (``rate`` only when ``unitPrice`` is missing)

Stored totals keep the distinction between "absent" (``None``) and
"present": a present value is coerced with ``safe_decimal`` even when it
is malformed, so ``"balance": "n/a"`` becomes a stored zero.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from invoice_kernel.domain.coercion import parse_timestamp, safe_decimal
from invoice_kernel.domain.invoice import (
    Invoice,
    InvoiceLineItem,
    InvoicePayment,
    InvoiceStatus,
    PaymentMethod,
)
from invoice_kernel.exceptions import InvoiceRecordError
from invoice_kernel.logging_config import get_logger, log_context

logger = get_logger("ingestion.mapping")

STORED_TOTAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("subtotal", "subtotal"),
    ("taxRate", "tax_rate"),
    ("taxAmount", "tax_amount"),
    ("retentionRate", "retention_rate"),
    ("retentionAmount", "retention_amount"),
    ("total", "total"),
    ("amountPaid", "amount_paid"),
    ("balance", "balance"),
)


# -----------------------------------------------------------------------------
# Result types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class RejectedRecord:
    """A record from a batch that could not be mapped."""

    index: int
    code: str
    message: str
    record_id: Any = None


@dataclass(frozen=True)
class InvoiceMappingResult:
    """Result of mapping a batch of raw invoice records."""

    invoices: tuple[Invoice, ...] = ()
    rejected: tuple[RejectedRecord, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return not self.rejected


# -----------------------------------------------------------------------------
# Field helpers (pure)
# -----------------------------------------------------------------------------


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _stored_decimal(record: Mapping[str, Any], key: str) -> Decimal | None:
    value = record.get(key)
    if value is None:
        return None
    return safe_decimal(value)


def _require_mapping(value: Any, record_id: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvoiceRecordError(
            f"expected an object, got {type(value).__name__}",
            record_id=record_id,
            field=field_name,
        )
    return value


def _entries(record: Mapping[str, Any], key: str, record_id: Any) -> list[Any]:
    value = record.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvoiceRecordError("expected a list", record_id=record_id, field=key)
    return list(value)


# -----------------------------------------------------------------------------
# Record mappers
# -----------------------------------------------------------------------------


def map_line_item(raw: Mapping[str, Any], invoice_id: str, index: int) -> InvoiceLineItem:
    """Map one raw line item; ``unitPrice`` wins over ``rate`` when present."""
    raw = _require_mapping(raw, invoice_id, f"lineItems[{index}]")
    unit_price = raw.get("unitPrice")
    if unit_price is None:
        unit_price = raw.get("rate")

    return InvoiceLineItem(
        id=_optional_str(raw.get("id")) or f"{invoice_id}-item-{index + 1}",
        description=str(raw.get("description") or ""),
        quantity=safe_decimal(raw.get("quantity")),
        unit_price=safe_decimal(unit_price),
        amount=_stored_decimal(raw, "amount"),
    )


def map_payment(raw: Mapping[str, Any], invoice_id: str, index: int) -> InvoicePayment:
    """Map one raw payment; unknown methods map to ``None``."""
    raw = _require_mapping(raw, invoice_id, f"payments[{index}]")
    method_raw = raw.get("method")
    method = PaymentMethod.parse(method_raw)
    if method is None and method_raw not in (None, ""):
        logger.warning("payment_method_unrecognized", extra={
            "invoice_id": invoice_id,
            "payment_index": index,
            "method": str(method_raw),
        })

    return InvoicePayment(
        id=_optional_str(raw.get("id")) or f"{invoice_id}-payment-{index + 1}",
        invoice_id=_optional_str(raw.get("invoiceId")) or invoice_id,
        amount=safe_decimal(raw.get("amount")),
        date=parse_timestamp(raw.get("date")),
        method=method,
        reference=_optional_str(raw.get("reference")),
        notes=_optional_str(raw.get("notes")),
        created_by=_optional_str(raw.get("createdBy")),
        created_at=parse_timestamp(raw.get("createdAt")),
    )


def _map_status(raw_status: Any, record_id: str) -> InvoiceStatus:
    if raw_status is None or raw_status == "":
        return InvoiceStatus.DRAFT
    status = InvoiceStatus.parse(raw_status)
    if status is None:
        raise InvoiceRecordError(
            f"unrecognized status {raw_status!r}", record_id=record_id, field="status"
        )
    return status


def map_invoice_record(record: Mapping[str, Any]) -> Invoice:
    """
    Translate one raw data-API record into a canonical ``Invoice``.

    Raises:
        InvoiceRecordError: the record is not an object, has no ``id``,
            carries an unrecognised ``status``, or has a line item or
            payment that is not an object.
    """
    record = _require_mapping(record, None, "invoice")
    raw_id = record.get("id")
    if raw_id is None or raw_id == "":
        raise InvoiceRecordError("missing id", field="id")
    invoice_id = str(raw_id)

    line_items = tuple(
        map_line_item(raw, invoice_id, i)
        for i, raw in enumerate(_entries(record, "lineItems", invoice_id))
    )
    payments = tuple(
        map_payment(raw, invoice_id, i)
        for i, raw in enumerate(_entries(record, "payments", invoice_id))
    )
    stored_totals = {
        attr: _stored_decimal(record, key) for key, attr in STORED_TOTAL_FIELDS
    }

    return Invoice(
        id=invoice_id,
        status=_map_status(record.get("status"), invoice_id),
        invoice_number=str(record.get("invoiceNumber") or ""),
        client_id=_optional_str(record.get("clientId")),
        project_id=_optional_str(record.get("projectId")),
        issued_at=parse_timestamp(_first_present(record, "issuedAt", "issueDate")),
        due_at=parse_timestamp(_first_present(record, "dueAt", "dueDate")),
        line_items=line_items,
        payments=payments,
        notes=_optional_str(record.get("notes")),
        created_at=parse_timestamp(record.get("createdAt")),
        updated_at=parse_timestamp(record.get("updatedAt")),
        **stored_totals,
    )


def map_invoice_records(records: Iterable[Any]) -> InvoiceMappingResult:
    """Map a batch, collecting rejected records instead of raising."""
    invoices: list[Invoice] = []
    rejected: list[RejectedRecord] = []

    for index, record in enumerate(records):
        with log_context(record_index=index):
            try:
                invoices.append(map_invoice_record(record))
            except InvoiceRecordError as exc:
                logger.warning("invoice_record_rejected", extra={
                    "record_id": exc.record_id,
                    "error_code": exc.code,
                    "reason": exc.reason,
                })
                rejected.append(RejectedRecord(
                    index=index,
                    code=exc.code,
                    message=str(exc),
                    record_id=exc.record_id,
                ))

    logger.info("invoice_records_mapped", extra={
        "mapped_count": len(invoices),
        "rejected_count": len(rejected),
    })
    return InvoiceMappingResult(invoices=tuple(invoices), rejected=tuple(rejected))
