"""
Tests for the JSON invoice source adapter.
"""

import json
from decimal import Decimal

import pytest

from invoice_ingestion import load_invoice_records, read_invoice_records
from invoice_kernel.exceptions import InvoiceRecordError


def _write(tmp_path, payload, name="invoices.json"):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


class TestReadInvoiceRecords:

    def test_reads_array(self, tmp_path):
        path = _write(tmp_path, [{"id": "a"}, {"id": "b"}])

        assert [r["id"] for r in read_invoice_records(path)] == ["a", "b"]

    def test_reads_export_object(self, tmp_path):
        path = _write(tmp_path, {"invoices": [{"id": "a"}], "exportedAt": "2024-02-01"})

        assert read_invoice_records(path) == [{"id": "a"}]

    def test_floats_parsed_as_decimal(self, tmp_path):
        path = _write(tmp_path, '[{"id": "a", "taxRate": 0.1, "total": 110.10}]')

        record = read_invoice_records(path)[0]

        assert record["taxRate"] == Decimal("0.1")
        assert isinstance(record["total"], Decimal)

    @pytest.mark.parametrize("payload", ['{"data": []}', '"invoices"', "42"])
    def test_rejects_documents_without_array(self, tmp_path, payload):
        with pytest.raises(InvoiceRecordError) as exc_info:
            read_invoice_records(_write(tmp_path, payload))

        assert exc_info.value.field == "invoices"

    def test_invalid_json_raises(self, tmp_path):
        with pytest.raises(json.JSONDecodeError):
            read_invoice_records(_write(tmp_path, "{not json"))

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_invoice_records(tmp_path / "absent.json")


class TestLoadInvoiceRecords:

    def test_maps_records(self, tmp_path):
        path = _write(tmp_path, {"invoices": [
            {
                "id": "a",
                "status": "Sent",
                "dueDate": "2024-02-01",
                "lineItems": [],
                "total": 550,
                "balance": 150,
                "amountPaid": 0,
            },
            {"id": "b", "status": "Unknown"},
        ]})

        result = load_invoice_records(path)

        assert [inv.id for inv in result.invoices] == ["a"]
        assert len(result.rejected) == 1
        assert result.invoices[0].balance == Decimal("150")
