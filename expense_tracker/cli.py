"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from expense_core.exceptions import ValidationError
from expense_core.formatting import format_amount
from expense_core.models import ExpenseRecord
from expense_core.services import ExpenseStore
from expense_core.storage import JSONFileStorage

DELETE_PROMPT = "Are you sure you want to delete this expense? [y/N] "


def _load_store(data_dir: Path) -> ExpenseStore:
    store = ExpenseStore(JSONFileStorage(data_dir))
    store.load()
    return store


def _format_expense(expense: ExpenseRecord) -> str:
    return f"[{expense.id}] {expense.date} ${format_amount(expense.amount)}  {expense.note}"


def _confirm(prompt: Callable[[str], str]) -> bool:
    try:
        answer = prompt(DELETE_PROMPT)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def handle_list(args: argparse.Namespace, store: ExpenseStore) -> int:
    if not len(store):
        print("No expenses found.")
        return 0
    print(f"Found {len(store)} expenses:")
    for expense in store:
        print(_format_expense(expense))
    return 0


def handle_add(args: argparse.Namespace, store: ExpenseStore) -> int:
    expense = store.submit({"amount": args.amount, "date": args.date, "note": args.note})
    print("Expense added:\n" + _format_expense(expense))
    return 0


def handle_edit(args: argparse.Namespace, store: ExpenseStore) -> int:
    if store.begin_edit(args.id) is None:
        print(f"Expense {args.id} not found", file=sys.stderr)
        return 1
    changes = {"amount": args.amount, "date": args.date, "note": args.note}
    store.update_draft(**{k: v for k, v in changes.items() if v is not None})
    expense = store.submit()
    print("Expense updated:\n" + _format_expense(expense))
    return 0


def handle_delete(
    args: argparse.Namespace,
    store: ExpenseStore,
    prompt: Optional[Callable[[str], str]] = None,
) -> int:
    if store.get(args.id) is None:
        print(f"Expense {args.id} not found", file=sys.stderr)
        return 1
    if not args.yes and not _confirm(prompt or input):
        print("Deletion cancelled.")
        return 0
    store.delete(args.id)
    print(f"Expense {args.id} deleted.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default="data",
        type=Path,
        help="Directory to store JSON data (default: ./data)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List expenses, newest first")

    add_parser = subparsers.add_parser("add", help="Add a new expense")
    add_parser.add_argument("amount")
    add_parser.add_argument("date", help="Calendar date, YYYY-MM-DD")
    add_parser.add_argument("note")

    edit_parser = subparsers.add_parser("edit", help="Edit an existing expense")
    edit_parser.add_argument("id", type=int)
    edit_parser.add_argument("--amount")
    edit_parser.add_argument("--date")
    edit_parser.add_argument("--note")

    delete_parser = subparsers.add_parser("delete", help="Delete an expense")
    delete_parser.add_argument("id", type=int)
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    return parser


HANDLERS = {
    "list": handle_list,
    "add": handle_add,
    "edit": handle_edit,
    "delete": handle_delete,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    store = _load_store(args.data_dir)

    try:
        return HANDLERS[args.command](args, store)
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
