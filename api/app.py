"""Flask single-page application over the expense store."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from flask import Flask, abort, jsonify, redirect, render_template_string, request, url_for
from flask_cors import CORS

from expense_core.exceptions import ValidationError
from expense_core.formatting import format_amount
from expense_core.models import DRAFT_FIELDS
from expense_core.services import ExpenseStore
from expense_core.storage import JSONFileStorage, KeyValueStorage

PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Expense Tracker</title>
</head>
<body>
<div class="app-container">
  <h1>Expense Tracker</h1>

  <form class="expense-form" method="post" action="{{ url_for('submit_expense') }}">
    <h2>{{ 'Update Expense' if editing else 'Add New Expense' }}</h2>
    {% if error %}<p class="form-error" role="alert">{{ error }}</p>{% endif %}
    <input class="form-input" type="number" step="any" name="amount"
           placeholder="Amount (e.g., 25.50)" value="{{ draft.amount }}">
    <input class="form-input" type="date" name="date" value="{{ draft.date }}">
    <input class="form-input" type="text" name="note"
           placeholder="Note (e.g., 'Coffee with friends')" value="{{ draft.note }}">
    <div class="form-actions">
      <button class="btn btn-primary" type="submit">
        {{ 'Update Expense' if editing else 'Add Expense' }}
      </button>
      {% if editing %}
      <button class="btn btn-secondary" type="submit" formnovalidate
              formaction="{{ url_for('cancel_edit') }}">Cancel</button>
      {% endif %}
    </div>
  </form>

  <div class="expense-list">
    <h2>Your Expenses</h2>
    {% if not expenses %}
    <p class="empty-list-message">No expenses recorded yet. Time to add one!</p>
    {% else %}
    <ul>
      {% for expense in expenses %}
      <li class="expense-item" id="expense-{{ expense.id }}">
        <div class="expense-details">
          <span class="date">{{ expense.date }}</span>
          <span class="note">{{ expense.note }}</span>
          <span class="amount">${{ format_amount(expense.amount) }}</span>
        </div>
        <div class="expense-actions">
          <form method="post" action="{{ url_for('edit_expense', expense_id=expense.id) }}">
            <button class="btn btn-edit" type="submit">Edit</button>
          </form>
          <form method="post" action="{{ url_for('delete_expense', expense_id=expense.id) }}"
                onsubmit="return confirm('Are you sure you want to delete this expense?');">
            <button class="btn btn-delete" type="submit">Delete</button>
          </form>
        </div>
      </li>
      {% endfor %}
    </ul>
    {% endif %}
  </div>
</div>
</body>
</html>
"""


def create_app(
    data_dir: Optional[Path] = None,
    storage: Optional[KeyValueStorage] = None,
) -> Flask:
    """Build the app around one ExpenseStore shared by every request.

    The store takes no locks, so serve the app from a single thread; `main`
    runs the development server with ``threaded=False``.
    """
    app = Flask(__name__)

    env_name = os.getenv("EXPENSE_TRACKER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/api/*": {"origins": "*"}})
    else:
        allowed_origins = os.getenv("EXPENSE_TRACKER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/api/*": {"origins": origins}})

    if storage is None:
        storage = JSONFileStorage(Path(data_dir or os.getenv("EXPENSE_TRACKER_DATA_DIR", "data")))
    store = ExpenseStore(storage)
    store.subscribe(
        lambda changed: app.logger.debug(
            "Expense state changed: %d record(s), editing=%s", len(changed), changed.editing_id
        )
    )
    store.load()
    app.extensions["expense_store"] = store

    def _render_page(error: Optional[str] = None, status: int = 200):
        html = render_template_string(
            PAGE_TEMPLATE,
            expenses=store.expenses,
            draft=store.draft,
            editing=store.is_editing,
            error=error,
            format_amount=format_amount,
        )
        return html, status

    def _form_draft() -> Dict[str, Any]:
        return {name: request.form.get(name, "") for name in DRAFT_FIELDS}

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        app.logger.error("Validation error: %s", exc)
        return _render_page("Please fill out all fields.", 400)

    @app.get("/")
    def index():
        return _render_page()

    @app.post("/expenses")
    def submit_expense():
        store.submit(_form_draft())
        return redirect(url_for("index"))

    @app.post("/expenses/<int:expense_id>/edit")
    def edit_expense(expense_id: int):
        if store.begin_edit(expense_id) is None:
            abort(404)
        return redirect(url_for("index"))

    @app.post("/edit/cancel")
    def cancel_edit():
        store.cancel_edit()
        return redirect(url_for("index"))

    @app.post("/expenses/<int:expense_id>/delete")
    def delete_expense(expense_id: int):
        store.delete(expense_id)
        return redirect(url_for("index"))

    @app.get("/api/expenses")
    def list_expenses():
        return jsonify({
            "items": [expense.to_dict() for expense in store.expenses],
            "editing_id": store.editing_id,
            "draft": store.draft.to_dict(),
        })

    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker web page")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", default=5000, type=int)
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory to store JSON data (default: $EXPENSE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    app = create_app(args.data_dir)
    # Requests must not interleave on the shared store.
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
