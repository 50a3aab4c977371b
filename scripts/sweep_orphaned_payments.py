#!/usr/bin/env python3
"""Report, and optionally delete, employee payments left without their compensation."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from condo_billing.core.errors import PersistenceError  # noqa: E402
from condo_billing.core.logger import get_logger  # noqa: E402
from condo_billing.core.money import format_currency  # noqa: E402
from condo_billing.db.session import session_scope  # noqa: E402
from condo_billing.repositories.sql_store import SqlRecordStore  # noqa: E402
from condo_billing.services.compensation_ledger import CompensationLedger  # noqa: E402

logger = get_logger("condo_billing.sweep")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--database-url", default=None, help="Override the configured database URL")
    parser.add_argument("--purge", action="store_true", help="Delete the orphaned payments found")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        with session_scope(args.database_url) as session:
            ledger = CompensationLedger(SqlRecordStore(session))
            orphans = ledger.find_orphaned_payments()
            for payment in orphans:
                logger.info(
                    "Orphaned payment %s: employee %s, %02d/%d, %s",
                    payment.id,
                    payment.employee_id,
                    payment.month,
                    payment.year,
                    format_currency(payment.total_amount),
                )
            if not orphans:
                logger.info("No orphaned payments found")
            elif args.purge:
                ledger.purge_orphaned_payments()
            else:
                logger.info("Found %d orphaned payment(s); rerun with --purge to delete", len(orphans))
    except PersistenceError:
        logger.exception("Sweep aborted")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
