"""Demo data for trying the ledger out on an empty data directory."""

from __future__ import annotations

from typing import Dict, List

_SAMPLE_ROWS = (
    ("income", "Salary", "3500.00", "01", "Monthly salary"),
    ("expense", "Rent", "1200.00", "02", ""),
    ("expense", "Groceries", "180.45", "05", "Weekly shop"),
    ("expense", "Transport", "60.00", "06", "Pass"),
    ("income", "Freelance", "420.00", "10", "Side gig"),
    ("expense", "Dining", "48.20", "11", ""),
    ("expense", "Utilities", "95.10", "12", ""),
)


def sample_payloads(today: str) -> List[Dict[str, str]]:
    """Return raw payloads dated within the month of ``today`` (``YYYY-MM-DD``)."""
    month = today[:7]
    return [
        {"type": kind, "category": category, "amount": amount, "date": f"{month}-{day}", "note": note}
        for kind, category, amount, day, note in _SAMPLE_ROWS
    ]
