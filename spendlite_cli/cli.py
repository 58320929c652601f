"""Console interface for the Spendlite ledger."""

from __future__ import annotations

import argparse
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, List, Optional

from spendlite.aggregation import category_names, category_totals, monthly_series, summary
from spendlite.config import Settings
from spendlite.exceptions import (
    MissingColumnsError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from spendlite.filters import sort_recent_first
from spendlite.logging_setup import configure_logging, get_logger
from spendlite.models import FilterSpec, Transaction
from spendlite.storage import JSONStorage
from spendlite.store import TransactionStore

logger = get_logger("spendlite.cli")

TYPE_CHOICES = ("income", "expense")
FILTER_TYPE_CHOICES = ("all",) + TYPE_CHOICES


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return value


def format_amount_display(value: Decimal) -> str:
    return f"{value:,.2f}"


def _format_transaction(transaction: Transaction) -> str:
    note = transaction.note or "-"
    return (
        f"[{transaction.id}] {transaction.date} {transaction.kind.label:<7} "
        f"{format_amount_display(transaction.amount):>12}  {transaction.category}  ({note})"
    )


def _load_store(data_dir: Path) -> TransactionStore:
    return TransactionStore(JSONStorage(data_dir))


def _filter_spec(args: argparse.Namespace) -> FilterSpec:
    return FilterSpec.from_params(
        kind=args.type,
        category=args.category,
        date_from=args.start,
        date_to=args.end,
        search_text=args.search,
    )


def _print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


def handle_add(args: argparse.Namespace, store: TransactionStore) -> None:
    payload = {
        "type": args.type,
        "category": args.category,
        "amount": args.amount,
        "date": args.date,
        "note": args.note,
    }
    transaction = store.add(payload)
    print("Transaction added:\n" + _format_transaction(transaction))


def handle_edit(args: argparse.Namespace, store: TransactionStore) -> None:
    changes = {
        "type": args.type,
        "category": args.category,
        "amount": args.amount,
        "date": args.date,
        "note": args.note,
    }
    cleaned = {k: v for k, v in changes.items() if v is not None}
    transaction = store.update(args.id, cleaned)
    print("Transaction updated:\n" + _format_transaction(transaction))


def handle_delete(args: argparse.Namespace, store: TransactionStore) -> None:
    store.delete(args.id)
    print(f"Transaction {args.id} deleted.")


def handle_list(args: argparse.Namespace, store: TransactionStore) -> None:
    records = store.list(_filter_spec(args))
    if not records:
        print("No transactions found.")
        return
    totals = summary(records)
    print(f"Found {len(records)} transactions (balance {format_amount_display(totals.balance)}):")
    _print_lines(_format_transaction(record) for record in sort_recent_first(records))


def handle_summary(args: argparse.Namespace, store: TransactionStore) -> None:
    totals = summary(store.list(_filter_spec(args)))
    print(f"Income:  {format_amount_display(totals.income_total):>14}")
    print(f"Expense: {format_amount_display(totals.expense_total):>14}")
    print(f"Balance: {format_amount_display(totals.balance):>14}")


def handle_monthly(args: argparse.Namespace, store: TransactionStore) -> None:
    buckets = monthly_series(store.list(_filter_spec(args)))
    if not buckets:
        print("No transactions found.")
        return
    print(f"{'Month':<8} {'Income':>14} {'Expense':>14}")
    _print_lines(
        f"{bucket.year_month:<8} {format_amount_display(bucket.income):>14} "
        f"{format_amount_display(bucket.expense):>14}"
        for bucket in buckets
    )


def handle_categories(args: argparse.Namespace, store: TransactionStore) -> None:
    records = store.list(_filter_spec(args))
    if args.names:
        _print_lines(category_names(records))
        return
    totals = category_totals(records)
    if not totals:
        print("No expenses found.")
        return
    _print_lines(f"{item.category:<24} {format_amount_display(item.total):>14}" for item in totals)


def handle_export(args: argparse.Namespace, store: TransactionStore) -> None:
    text = store.export_csv()
    if args.path is None:
        sys.stdout.write(text)
        return
    args.path.write_text(text, encoding="utf-8")
    print(f"Exported {len(store)} transactions to {args.path}")


def handle_import(args: argparse.Namespace, store: TransactionStore) -> None:
    try:
        text = args.path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise PersistenceError(f"Unable to read {args.path}") from exc
    count = store.import_csv(text)
    print(f"Imported {count} transactions from {args.path}")


def handle_sample(args: argparse.Namespace, store: TransactionStore) -> None:
    sample = store.load_sample()
    print(f"Added {len(sample)} sample transactions.")


HANDLERS = {
    "add": handle_add,
    "edit": handle_edit,
    "delete": handle_delete,
    "list": handle_list,
    "summary": handle_summary,
    "monthly": handle_monthly,
    "categories": handle_categories,
    "export": handle_export,
    "import": handle_import,
    "sample": handle_sample,
}


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--type", choices=FILTER_TYPE_CHOICES, default="all")
    parser.add_argument("--category")
    parser.add_argument("--start", help="Earliest date, YYYY-MM-DD")
    parser.add_argument("--end", help="Latest date, YYYY-MM-DD")
    parser.add_argument("--search", help="Text to look for in category and note")


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(prog="spendlite", description="Spendlite personal ledger")
    parser.add_argument(
        "--data-dir",
        default=settings.data_dir,
        type=Path,
        help="Directory to store JSON data (default: $SPENDLITE_DATA_DIR or ./data)",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level, e.g. DEBUG")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add a new transaction")
    add.add_argument("type", choices=TYPE_CHOICES)
    add.add_argument("category")
    add.add_argument("amount", type=_parse_amount)
    add.add_argument("--date", help="YYYY-MM-DD, defaults to today")
    add.add_argument("--note", default="")

    edit = subparsers.add_parser("edit", help="Edit an existing transaction")
    edit.add_argument("id")
    edit.add_argument("--type", choices=TYPE_CHOICES)
    edit.add_argument("--category")
    edit.add_argument("--amount", type=_parse_amount)
    edit.add_argument("--date")
    edit.add_argument("--note")

    delete = subparsers.add_parser("delete", help="Delete a transaction")
    delete.add_argument("id")

    listing = subparsers.add_parser("list", help="List transactions, newest first")
    _add_filter_arguments(listing)

    summary_parser = subparsers.add_parser("summary", help="Income, expense and balance totals")
    _add_filter_arguments(summary_parser)

    monthly = subparsers.add_parser("monthly", help="Income and expense per month")
    _add_filter_arguments(monthly)

    categories = subparsers.add_parser("categories", help="Expense totals per category")
    _add_filter_arguments(categories)
    categories.add_argument("--names", action="store_true", help="Only list category names")

    export = subparsers.add_parser("export", help="Export all transactions as CSV")
    export.add_argument("path", nargs="?", type=Path, help="Output file (default: stdout)")

    import_parser = subparsers.add_parser("import", help="Merge transactions from a CSV file")
    import_parser.add_argument("path", type=Path)

    subparsers.add_parser("sample", help="Add demo transactions for the current month")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        store = _load_store(args.data_dir)
        HANDLERS[args.command](args, store)
    except MissingColumnsError as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        logger.error("Storage error: %s", exc)
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
