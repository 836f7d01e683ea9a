#!/usr/bin/env python3
"""Replay every account's transactions and report balances that drifted."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rich.console import Console  # noqa: E402
from rich.table import Table  # noqa: E402

from fintrack.core.logger import get_logger, init_logging, log_context, timeit  # noqa: E402  (import after sys.path manipulation)
from fintrack.db.session import session_scope  # noqa: E402
from fintrack.services import ReconciliationService  # noqa: E402

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--quiet", action="store_true", help="only set the exit status")
    args = parser.parse_args(argv)

    service = ReconciliationService()
    with timeit(
        "Balance reconciliation", logger=logger, level=logging.INFO, unit="drifted accounts"
    ) as timer, session_scope() as session:
        drifts = service.find_drift(session, show_progress=not args.quiet)
        timer.add(len(drifts))

    if not drifts:
        logger.info("All account balances match their replayed ledger")
        return 0

    if not args.quiet:
        table = Table(title="Balance drift")
        table.add_column("Account")
        table.add_column("Stored", justify="right")
        table.add_column("Expected", justify="right")
        table.add_column("Difference", justify="right")
        for drift in drifts:
            table.add_row(
                drift.account_id,
                format(drift.stored, "f"),
                format(drift.expected, "f"),
                format(drift.difference, "f"),
            )
        Console().print(table)
    return 1


if __name__ == "__main__":
    init_logging(app_name="reconcile")
    log_context.bind(job="reconcile_balances")
    raise SystemExit(main())
