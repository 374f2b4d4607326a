"""
invoice_config -- single public entrypoint for invoice engine settings.

Responsibility:
    Provides the way to obtain settings at runtime through
    ``get_active_config()``.  Settings come from YAML: the packaged
    ``defaults.yaml`` or a file supplied by the caller.

Architecture position:
    Configuration -- sits above ``invoice_kernel``.  The engines MUST
    NEVER import from ``invoice_config``; callers read the settings and
    pass the values (collection window, due-soon threshold, status
    order) into engine calls.

Failure modes:
    - ``FileNotFoundError`` -- the settings file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ConfigurationError`` -- parsing or validation failed.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``INVOICE_CONFIG_TRACE`` log entry with the source path and checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from invoice_kernel.exceptions import ConfigurationError
from invoice_config.loader import load_yaml_file, parse_settings
from invoice_config.schema import EngineSettings, ReportingSettings
from invoice_config.validator import validate_settings

_logger = logging.getLogger("invoice_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(config_path: Path | None = None) -> EngineSettings:
    """Load, parse and validate engine settings.

    Args:
        config_path: Settings file to load.  Defaults to the packaged
            ``defaults.yaml``.

    Returns:
        Frozen ``EngineSettings`` carrying the source checksum.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the settings fail parsing or validation.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    data = load_yaml_file(path)
    settings = parse_settings(data, source=str(path))

    errors = validate_settings(settings)
    if errors:
        raise ConfigurationError(errors, str(path))

    _logger.info(
        "INVOICE_CONFIG_TRACE",
        extra={
            "trace_type": "INVOICE_CONFIG_TRACE",
            "source": str(path),
            "checksum": settings.checksum,
            "currency": settings.currency,
            "collection_window_days": settings.reporting.collection_window_days,
            "due_soon_days": settings.reporting.due_soon_days,
        },
    )
    return settings


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "EngineSettings",
    "ReportingSettings",
    "get_active_config",
]
