"""Tests for the console interface."""

import json

import pytest

from expense_tracker.cli import main


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


def run(data_dir, *args):
    return main(["--data-dir", str(data_dir), *args])


def stored(data_dir):
    return json.loads((data_dir / "expenses.json").read_text(encoding="utf-8"))


def test_list_empty(data_dir, capsys):
    assert run(data_dir, "list") == 0
    assert "No expenses found." in capsys.readouterr().out


def test_add_and_list(data_dir, capsys):
    assert run(data_dir, "add", "12.5", "2024-01-01", "Lunch") == 0
    assert run(data_dir, "add", "3", "2024-01-02", "Coffee") == 0
    capsys.readouterr()

    assert run(data_dir, "list") == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Found 2 expenses:"
    assert "Coffee" in lines[1] and "$3.00" in lines[1]
    assert "Lunch" in lines[2] and "$12.50" in lines[2]
    assert [entry["amount"] for entry in stored(data_dir)] == ["3", "12.5"]


def test_add_with_empty_field_fails(data_dir, capsys):
    assert run(data_dir, "add", "12.5", "2024-01-01", "") == 1

    assert "Validation error: note cannot be empty" in capsys.readouterr().err
    assert not (data_dir / "expenses.json").exists()


def test_edit_overrides_given_fields(data_dir):
    run(data_dir, "add", "12.50", "2024-01-01", "Lunch")
    expense_id = stored(data_dir)[0]["id"]

    assert run(data_dir, "edit", str(expense_id), "--amount", "15.00") == 0

    assert stored(data_dir) == [
        {"id": expense_id, "amount": "15.00", "date": "2024-01-01", "note": "Lunch"}
    ]


def test_edit_unknown_id(data_dir, capsys):
    assert run(data_dir, "edit", "42", "--note", "x") == 1
    assert "Expense 42 not found" in capsys.readouterr().err


def test_edit_to_empty_value_fails(data_dir, capsys):
    run(data_dir, "add", "12.50", "2024-01-01", "Lunch")
    expense_id = stored(data_dir)[0]["id"]

    assert run(data_dir, "edit", str(expense_id), "--note", "") == 1
    assert stored(data_dir)[0]["note"] == "Lunch"


def test_delete_with_yes(data_dir, capsys):
    run(data_dir, "add", "12.50", "2024-01-01", "Lunch")
    expense_id = stored(data_dir)[0]["id"]

    assert run(data_dir, "delete", str(expense_id), "--yes") == 0

    assert stored(data_dir) == []
    assert f"Expense {expense_id} deleted." in capsys.readouterr().out


def test_delete_prompts_and_can_be_declined(data_dir, capsys, monkeypatch):
    run(data_dir, "add", "12.50", "2024-01-01", "Lunch")
    expense_id = stored(data_dir)[0]["id"]
    prompts = []
    monkeypatch.setattr("builtins.input", lambda text: prompts.append(text) or "n")

    assert run(data_dir, "delete", str(expense_id)) == 0

    assert prompts == ["Are you sure you want to delete this expense? [y/N] "]
    assert "Deletion cancelled." in capsys.readouterr().out
    assert len(stored(data_dir)) == 1


def test_delete_prompt_accepts_yes(data_dir, monkeypatch):
    run(data_dir, "add", "12.50", "2024-01-01", "Lunch")
    expense_id = stored(data_dir)[0]["id"]
    monkeypatch.setattr("builtins.input", lambda text: "y")

    assert run(data_dir, "delete", str(expense_id)) == 0
    assert stored(data_dir) == []


def test_delete_unknown_id(data_dir, capsys):
    assert run(data_dir, "delete", "7", "--yes") == 1
    assert "Expense 7 not found" in capsys.readouterr().err


def test_corrupted_file_lists_as_empty(data_dir, capsys):
    data_dir.mkdir()
    (data_dir / "expenses.json").write_text("{broken", encoding="utf-8")

    assert run(data_dir, "list") == 0
    assert "No expenses found." in capsys.readouterr().out
