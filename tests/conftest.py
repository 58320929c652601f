"""Shared fixtures: every test gets its own data directory and a fixed clock."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List

import pytest

from spendlite.models import Transaction, TransactionKind
from spendlite.storage import JSONStorage
from spendlite.store import TransactionStore

FIXED_TODAY = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SPENDLITE_DATA_DIR", "SPENDLITE_ENV", "SPENDLITE_ALLOWED_ORIGINS", "SPENDLITE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def storage(tmp_path: Path) -> JSONStorage:
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def store(storage: JSONStorage) -> TransactionStore:
    return TransactionStore(storage, clock=lambda: FIXED_TODAY)


@pytest.fixture
def january() -> List[Transaction]:
    return [
        Transaction("t1", TransactionKind.INCOME, "Salary", Decimal("3500.00"), "2024-01-01", "Monthly salary"),
        Transaction("t2", TransactionKind.EXPENSE, "Rent", Decimal("1200.00"), "2024-01-02"),
        Transaction("t3", TransactionKind.EXPENSE, "Groceries", Decimal("180.45"), "2024-01-05", "Weekly shop"),
    ]
