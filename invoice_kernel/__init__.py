"""
Invoice Kernel

Domain types, safe coercion, clock, logging and typed errors shared by
the invoice engines:
- Canonical alias-free invoice snapshots
- Decimal-only monetary values
- Injectable time source
- Structured JSON logging
"""

__version__ = "0.1.0"
