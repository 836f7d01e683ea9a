#!/usr/bin/env python3
"""Create the ledger tables on the configured database."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fintrack.core.config import get_settings  # noqa: E402  (import after sys.path manipulation)
from fintrack.core.logger import get_logger, init_logging  # noqa: E402
from fintrack.db.engine import create_sync_engine  # noqa: E402
from fintrack.models import Base  # noqa: E402

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="drop existing ledger tables first")
    args = parser.parse_args(argv)

    settings = get_settings()
    engine = create_sync_engine()
    if args.drop:
        logger.warning("Dropping ledger tables on %s", settings.database.masked_url)
        Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    logger.info("Ledger tables ready on %s", settings.database.masked_url)
    return 0


if __name__ == "__main__":
    init_logging(app_name="init-db")
    raise SystemExit(main())
