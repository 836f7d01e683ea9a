#!/usr/bin/env python3
"""Seed demo accounts and drive random ledger activity through the service."""
from __future__ import annotations

import argparse
import random
import sys
from decimal import Decimal
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from faker import Faker  # noqa: E402

from fintrack.core.errors import InsufficientBalance  # noqa: E402  (import after sys.path manipulation)
from fintrack.core.logger import get_logger, init_logging, log_context, progress_manager  # noqa: E402
from fintrack.db.session import get_sessionmaker  # noqa: E402
from fintrack.domain.caller import CallerScope  # noqa: E402
from fintrack.models import FinanceAccountType, TransactionType  # noqa: E402
from fintrack.schemas import AccountCreate, TransactionCreate, TransactionUpdate  # noqa: E402
from fintrack.services import AccountsService, LedgerService, ReconciliationService  # noqa: E402

logger = get_logger(__name__)

ACCOUNT_KINDS = (
    ("Checking", FinanceAccountType.BANK),
    ("Wallet", FinanceAccountType.CASH),
    ("Mobile", FinanceAccountType.MOBILE_WALLET),
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--users", type=int, default=5, help="Number of demo users to create")
    parser.add_argument("--operations", type=int, default=200, help="Ledger operations to run")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--currency", type=str, default="EUR", help="Currency of the demo accounts")
    return parser.parse_args(argv)


def random_amount(rng: random.Random, high: int) -> str:
    cents = rng.randint(100, high * 100)
    return str(Decimal(cents) / 100)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    rng = random.Random(args.seed)
    faker = Faker("nl_NL")
    faker.seed_instance(args.seed)

    ledger = LedgerService()
    accounts_service = AccountsService()
    Session = get_sessionmaker()

    with Session() as session:
        owned: dict[CallerScope, list[str]] = {}
        for _ in range(args.users):
            caller = CallerScope(user_id=faker.uuid4())
            first_name = faker.first_name()
            owned[caller] = [
                accounts_service.create_account(
                    session,
                    AccountCreate(
                        name=f"{first_name} {label}",
                        type=kind,
                        currency=args.currency,
                        initial_balance=random_amount(rng, 2_000),
                    ),
                    caller,
                ).id
                for label, kind in ACCOUNT_KINDS
            ]
        logger.info("Opened %s accounts for %s demo users", args.users * len(ACCOUNT_KINDS), args.users)

        live: list[tuple[CallerScope, str]] = []
        rejected = 0
        operations = progress_manager.track(
            range(args.operations), description="Ledger operations", total=args.operations
        )
        for _ in operations:
            caller = rng.choice(list(owned))
            action = rng.choice(("create", "create", "create", "update", "delete"))
            try:
                if action == "update" and live:
                    owner, transaction_id = rng.choice(live)
                    ledger.update_transaction(
                        session, transaction_id, TransactionUpdate(amount=random_amount(rng, 300)), owner
                    )
                elif action == "delete" and live:
                    owner, transaction_id = live.pop(rng.randrange(len(live)))
                    ledger.delete_transaction(session, transaction_id, owner)
                else:
                    source, destination = rng.sample(owned[caller], 2)
                    kind = rng.choice(list(TransactionType))
                    payload = TransactionCreate(
                        type=kind,
                        amount=random_amount(rng, 300),
                        fee_amount=rng.choice(("0", "0", "0.50", "1.25")),
                        account_id=source,
                        to_account_id=destination if kind is TransactionType.TRANSFER else None,
                        description=faker.sentence(nb_words=4),
                    )
                    live.append((caller, ledger.create_transaction(session, payload, caller).id))
            except InsufficientBalance:
                rejected += 1

        logger.info(
            "Ran %s ledger operations (%s rejected for insufficient funds, %s transactions kept)",
            args.operations,
            rejected,
            len(live),
        )
        drifts = ReconciliationService(ledger.settings).find_drift(session)

    if drifts:
        logger.error("%s accounts drifted from their replayed balance", len(drifts))
        return 1
    logger.info("All demo balances reconcile")
    return 0


if __name__ == "__main__":
    init_logging(app_name="seed-demo")
    log_context.bind(job="seed_demo")
    raise SystemExit(main())
