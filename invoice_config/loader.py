"""
Configuration Loader (``invoice_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into ``invoice_config.schema``
dataclasses.  Callers obtain settings through
``invoice_config.get_active_config()``, which also validates them.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrongly typed values  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from invoice_kernel.domain.invoice import InvoiceStatus
from invoice_kernel.exceptions import ConfigurationError
from invoice_config.schema import EngineSettings, ReportingSettings


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(["top-level document must be a mapping"], str(path))
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _parse_int(value: Any, name: str, source: str | None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError([f"{name} must be an integer, got {value!r}"], source)
    return value


def _parse_status_order(value: Any, source: str | None) -> tuple[InvoiceStatus, ...]:
    if not isinstance(value, list):
        raise ConfigurationError(["reporting.status_order must be a list"], source)
    order: list[InvoiceStatus] = []
    for item in value:
        status = InvoiceStatus.parse(item)
        if status is None:
            raise ConfigurationError(
                [f"reporting.status_order has unknown status {item!r}"], source
            )
        order.append(status)
    return tuple(order)


def parse_settings(data: dict[str, Any], source: str | None = None) -> EngineSettings:
    """Parse a settings dict; missing keys take the schema defaults."""
    defaults = ReportingSettings()
    reporting_raw = data.get("reporting") or {}
    if not isinstance(reporting_raw, dict):
        raise ConfigurationError(["reporting must be a mapping"], source)

    reporting = ReportingSettings(
        collection_window_days=_parse_int(
            reporting_raw.get("collection_window_days", defaults.collection_window_days),
            "reporting.collection_window_days",
            source,
        ),
        due_soon_days=_parse_int(
            reporting_raw.get("due_soon_days", defaults.due_soon_days),
            "reporting.due_soon_days",
            source,
        ),
        status_order=(
            _parse_status_order(reporting_raw["status_order"], source)
            if "status_order" in reporting_raw
            else defaults.status_order
        ),
    )

    currency = data.get("currency", EngineSettings.currency)
    if not isinstance(currency, str):
        raise ConfigurationError([f"currency must be a string, got {currency!r}"], source)

    return EngineSettings(
        currency=currency.strip().upper(),
        reporting=reporting,
        checksum=compute_checksum(data),
        source=source,
    )
