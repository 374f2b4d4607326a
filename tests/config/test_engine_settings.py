"""Tests for loading, parsing and validating invoice engine settings."""

from __future__ import annotations

import pytest
import yaml

from invoice_config import DEFAULT_CONFIG_PATH, get_active_config
from invoice_config.loader import compute_checksum, load_yaml_file, parse_settings
from invoice_config.schema import EngineSettings, ReportingSettings
from invoice_config.validator import validate_settings
from invoice_kernel.domain.invoice import InvoiceStatus
from invoice_kernel.exceptions import ConfigurationError


def _write_yaml(tmp_path, text, name="settings.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestGetActiveConfig:

    def test_packaged_defaults(self):
        settings = get_active_config()

        assert settings.currency == "GBP"
        assert settings.reporting == ReportingSettings()
        assert settings.source == str(DEFAULT_CONFIG_PATH)
        assert len(settings.checksum) == 64

    def test_custom_file(self, tmp_path):
        path = _write_yaml(tmp_path, (
            "currency: usd\n"
            "reporting:\n"
            "  collection_window_days: 60\n"
            "  due_soon_days: 5\n"
        ))

        settings = get_active_config(path)

        assert settings.currency == "USD"
        assert settings.reporting.collection_window_days == 60
        assert settings.reporting.due_soon_days == 5
        assert settings.reporting.status_order == ReportingSettings().status_order

    def test_emits_config_trace(self, tmp_path, captured_logs):
        path = _write_yaml(tmp_path, "currency: EUR\n")

        settings = get_active_config(path)

        trace = next(r for r in captured_logs() if r["message"] == "INVOICE_CONFIG_TRACE")
        assert trace["checksum"] == settings.checksum
        assert trace["source"] == str(path)
        assert trace["currency"] == "EUR"

    def test_invalid_settings_raise(self, tmp_path):
        path = _write_yaml(tmp_path, (
            "currency: pounds\n"
            "reporting:\n"
            "  collection_window_days: 0\n"
        ))

        with pytest.raises(ConfigurationError) as exc_info:
            get_active_config(path)

        error = exc_info.value
        assert error.code == "INVALID_CONFIGURATION"
        assert error.source == str(path)
        assert len(error.errors) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")


class TestLoader:

    def test_empty_file_is_empty_mapping(self, tmp_path):
        assert load_yaml_file(_write_yaml(tmp_path, "")) == {}

    def test_non_mapping_document_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_yaml_file(_write_yaml(tmp_path, "- a\n- b\n"))

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(yaml.YAMLError):
            load_yaml_file(_write_yaml(tmp_path, "currency: [GBP\n"))

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})

    def test_status_order_parsed(self):
        settings = parse_settings({"reporting": {"status_order": [
            "draft", "Sent", "OVERDUE", "Paid", "Cancelled",
        ]}})

        assert settings.reporting.status_order[0] is InvoiceStatus.DRAFT
        assert settings.reporting.status_order[2] is InvoiceStatus.OVERDUE

    @pytest.mark.parametrize(
        "data",
        [
            {"reporting": {"status_order": ["Sent", "Disputed"]}},
            {"reporting": {"status_order": "Sent"}},
            {"reporting": {"due_soon_days": "three"}},
            {"reporting": {"collection_window_days": True}},
            {"reporting": ["not", "a", "mapping"]},
            {"currency": 826},
        ],
    )
    def test_wrong_types_rejected(self, data):
        with pytest.raises(ConfigurationError):
            parse_settings(data, source="inline")


class TestValidator:

    def test_defaults_valid(self):
        assert validate_settings(EngineSettings()) == []

    def test_incomplete_status_order(self):
        settings = EngineSettings(reporting=ReportingSettings(
            status_order=(InvoiceStatus.SENT, InvoiceStatus.SENT),
        ))

        errors = validate_settings(settings)

        assert any("more than once" in e for e in errors)
        assert any("missing" in e for e in errors)

    def test_negative_due_soon(self):
        settings = EngineSettings(reporting=ReportingSettings(due_soon_days=-1))

        assert validate_settings(settings) == ["reporting.due_soon_days must not be negative"]
