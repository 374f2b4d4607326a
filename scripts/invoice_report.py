#!/usr/bin/env python3
"""
Print derived invoice figures and the receivables summary for an export.

Reads a JSON export of invoice records (an array, or an object with an
``invoices`` array), maps it through the ingestion boundary and runs the
invoice engines as of ``--as-of`` (default: now).

Usage:
    python3 scripts/invoice_report.py invoices.json
    python3 scripts/invoice_report.py invoices.json --as-of 2024-02-01
    python3 scripts/invoice_report.py invoices.json --status Overdue --config settings.yaml
"""

import argparse
import logging
import sys
import uuid
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _money(value, currency: str) -> str:
    return f"{value:,.2f} {currency}"


def main(argv: list[str] | None = None) -> int:
    from invoice_config import get_active_config
    from invoice_engines import (
        describe_due_date_aging,
        derive,
        filter_by_derived_status,
        sort_worklist,
        summarize_portfolio,
    )
    from invoice_ingestion import load_invoice_records
    from invoice_kernel.domain.clock import SystemClock
    from invoice_kernel.domain.coercion import parse_timestamp
    from invoice_kernel.domain.invoice import InvoiceStatus
    from invoice_kernel.logging_config import configure_logging, log_context

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("source", type=Path, help="JSON export of invoice records")
    parser.add_argument("--as-of", help="ISO-8601 reference time (default: now)")
    parser.add_argument("--status", help="Only list invoices with this derived status")
    parser.add_argument("--config", type=Path, help="Engine settings YAML")
    parser.add_argument("--verbose", action="store_true", help="Emit JSON logs to stderr")
    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    with log_context(correlation_id=uuid.uuid4().hex):
        settings = get_active_config(args.config)
        reporting = settings.reporting

        if args.as_of:
            now = parse_timestamp(args.as_of)
            if now is None:
                print(f"  ERROR: --as-of is not a valid timestamp: {args.as_of}", file=sys.stderr)
                return 2
        else:
            now = SystemClock().now()

        if args.status and InvoiceStatus.parse(args.status) is None:
            print(f"  ERROR: unknown status: {args.status}", file=sys.stderr)
            return 2

        result = load_invoice_records(args.source)
        for rejected in result.rejected:
            print(f"  SKIPPED record #{rejected.index}: {rejected.message}", file=sys.stderr)

        invoices = sort_worklist(result.invoices, now, reporting.status_order)
        if args.status:
            invoices = filter_by_derived_status(invoices, args.status, now)

        currency = settings.currency
        print(f"{'Invoice':<14}{'Status':<11}{'Total':>18}{'Paid':>18}{'Balance':>18}  Due")
        for invoice in invoices:
            derived = derive(invoice, now)
            aging = describe_due_date_aging(invoice, now, reporting.due_soon_days)
            status = getattr(derived.status, "value", derived.status)
            print(
                f"{invoice.invoice_number or invoice.id:<14}{status:<11}"
                f"{_money(derived.financials.total, currency):>18}"
                f"{_money(derived.financials.amount_paid, currency):>18}"
                f"{_money(derived.financials.balance, currency):>18}  {aging.label}"
            )

        summary = summarize_portfolio(result.invoices, now, reporting.collection_window_days)
        print()
        print(f"Outstanding balance: {_money(summary.outstanding, currency)}")
        print(f"Overdue exposure:    {_money(summary.overdue_exposure, currency)}")
        print(
            f"Collected (last {reporting.collection_window_days} days): "
            f"{_money(summary.paid_in_window, currency)}"
        )
        print(f"Collection rate:     {summary.collection_rate}%")
        print(f"Draft invoices:      {summary.draft_count}")
        return 0


if __name__ == "__main__":
    sys.exit(main())
