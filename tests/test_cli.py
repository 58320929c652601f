"""Tests for the console front-end."""

from spendlite.storage import STORAGE_KEY, JSONStorage
from spendlite.store import TransactionStore
from spendlite_cli.cli import main


def _run(data_dir, *argv):
    return main(["--data-dir", str(data_dir), *argv])


def _store(data_dir):
    return TransactionStore(JSONStorage(data_dir))


def test_add_list_and_summary(tmp_path, capsys):
    data_dir = tmp_path / "data"
    assert _run(data_dir, "add", "income", "Salary", "3500", "--date", "2024-01-01") == 0
    assert _run(data_dir, "add", "expense", "Rent", "1200", "--date", "2024-01-02") == 0
    assert _run(data_dir, "add", "expense", "Groceries", "180.45", "--date", "2024-01-05", "--note", "shop") == 0
    capsys.readouterr()

    assert _run(data_dir, "summary") == 0
    out = capsys.readouterr().out
    assert "3,500.00" in out
    assert "1,380.45" in out
    assert "2,119.55" in out

    assert _run(data_dir, "list", "--type", "expense") == 0
    out = capsys.readouterr().out
    assert "Found 2 transactions" in out
    assert out.index("Groceries") < out.index("Rent")

    assert _run(data_dir, "monthly") == 0
    assert "2024-01" in capsys.readouterr().out

    assert _run(data_dir, "categories") == 0
    out = capsys.readouterr().out
    assert out.index("Rent") < out.index("Groceries")


def test_edit_and_delete(tmp_path, capsys):
    data_dir = tmp_path / "data"
    _run(data_dir, "add", "expense", "Food", "10", "--date", "2024-01-05")
    (transaction,) = _store(data_dir).all()

    assert _run(data_dir, "edit", transaction.id, "--amount", "12.5", "--note", "dinner") == 0
    (edited,) = _store(data_dir).all()
    assert str(edited.amount) == "12.50"
    assert edited.note == "dinner"

    assert _run(data_dir, "delete", transaction.id) == 0
    assert _store(data_dir).all() == ()

    assert _run(data_dir, "delete", transaction.id) == 1
    assert "not found" in capsys.readouterr().err


def test_export_import_round_trip(tmp_path):
    source = tmp_path / "source"
    target = tmp_path / "target"
    export_path = tmp_path / "out.csv"
    _run(source, "add", "expense", "Coffee, Tea", "4.50", "--date", "2024-02-01")
    _run(source, "sample")

    assert _run(source, "export", str(export_path)) == 0
    assert _run(target, "import", str(export_path)) == 0
    assert _run(target, "import", str(export_path)) == 0
    assert _store(target).all() == _store(source).all()


def test_import_with_missing_columns_fails(tmp_path, capsys):
    bad = tmp_path / "bad.csv"
    bad.write_text("id,type,category,date\n1,income,Gift,2024-01-01\n", encoding="utf-8")
    assert _run(tmp_path / "data", "import", str(bad)) == 1
    assert "Import failed" in capsys.readouterr().err
    assert _store(tmp_path / "data").all() == ()


def test_invalid_filter_date_is_reported(tmp_path, capsys):
    assert _run(tmp_path / "data", "list", "--start", "2024/01/01") == 1
    assert "Validation error" in capsys.readouterr().err


def test_malformed_store_file_is_a_storage_error(tmp_path, capsys):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / STORAGE_KEY).write_text(
        '[{"id": "1", "type": "expense", "category": "Food", "amount": "abc", "date": "2024-01-01"}]',
        encoding="utf-8",
    )
    assert _run(data_dir, "list") == 1
    assert "Storage error" in capsys.readouterr().err
