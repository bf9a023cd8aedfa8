from __future__ import annotations

import argparse
import logging
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from clients.finance_api import FinanceAPIClient
from config import config
from db.db import init_db
from db.repositories import TransactionLineRepository
from domain.balance import build_ledger_view, entries_for_account
from domain.ledger import AccountId, LedgerEntry
from domain.tax import TaxField, TaxFieldSet, resolve
from importers.ledger_csv import load_ledger_entries
from utils.ledger_report import render_ledger, render_tax_fields


def run_ledger(*, csv_path: Path | None, account_id: str | None, stored_account_id: str | None = None) -> str:
    entries: list[LedgerEntry]
    if csv_path is not None:
        entries = load_ledger_entries(csv_path)
    elif stored_account_id is not None:
        account = AccountId(stored_account_id)
        with init_db(db_file=config().database_file) as session:
            entries = entries_for_account(TransactionLineRepository(session).list_for_account(account), account)
    elif account_id is not None:
        settings = config()
        client = FinanceAPIClient(base_url=settings.finance_api_url, token=settings.finance_api_token)
        entries = client.get_account_ledger(AccountId(account_id))
    else:
        raise ValueError("one of csv_path, account_id or stored_account_id is required")

    view = build_ledger_view(entries)
    return render_ledger(view.entries, view.summary)


def run_tax(fields: TaxFieldSet, edited_field: TaxField) -> str:
    return render_tax_fields(resolve(fields, edited_field))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Finance back-office ledger and tax tools.")
    parser.add_argument("--log-level", type=str.upper, default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    ledger = subparsers.add_parser("ledger", help="Print an account ledger with running balance.")
    source = ledger.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", type=Path)
    source.add_argument("--account")
    source.add_argument("--stored-account", help="Read the account from the local database.")

    tax = subparsers.add_parser("tax", help="Reconcile the tax fields of a bill.")
    tax.add_argument("--taxable-value", type=Decimal)
    tax.add_argument("--rate", type=Decimal)
    tax.add_argument("--primary", type=Decimal)
    tax.add_argument("--split-a", type=Decimal)
    tax.add_argument("--split-b", type=Decimal)
    tax.add_argument("--cess", type=Decimal)
    tax.add_argument("--total", type=Decimal)
    tax.add_argument("--split", action="store_true")
    tax.add_argument("--edited", type=TaxField, choices=list(TaxField), default=TaxField.TAXABLE_VALUE)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=(args.log_level or config().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if args.command == "ledger":
        print(run_ledger(csv_path=args.csv, account_id=args.account, stored_account_id=args.stored_account))
    else:
        fields = TaxFieldSet(
            taxable_value=args.taxable_value,
            tax_rate_percent=args.rate,
            primary_tax_amount=args.primary,
            split_tax_amount_a=args.split_a,
            split_tax_amount_b=args.split_b,
            cess_amount=args.cess,
            total=args.total,
            is_split=args.split,
        )
        print(run_tax(fields, args.edited))


if __name__ == "__main__":
    main()
