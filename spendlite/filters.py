"""Filter engine applied before display and aggregation."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .models import FilterSpec, Transaction

__all__ = ["apply_filters", "matches", "sort_recent_first"]


def matches(transaction: Transaction, spec: FilterSpec) -> bool:
    """Return True when the transaction satisfies every clause of ``spec``."""
    if spec.kind is not None and transaction.kind != spec.kind:
        return False
    if spec.category and transaction.category.lower() != spec.category.lower():
        return False
    # ISO dates compare chronologically as plain strings.
    if spec.date_from and transaction.date < spec.date_from:
        return False
    if spec.date_to and transaction.date > spec.date_to:
        return False
    if spec.search_text:
        haystack = f"{transaction.category} {transaction.note}".lower()
        if spec.search_text.lower() not in haystack:
            return False
    return True


def apply_filters(
    records: Iterable[Transaction], spec: Optional[FilterSpec] = None
) -> List[Transaction]:
    """Return the records kept by ``spec`` in their original relative order."""
    if spec is None or spec.is_empty:
        return list(records)
    return [record for record in records if matches(record, spec)]


def sort_recent_first(records: Iterable[Transaction]) -> List[Transaction]:
    """Order records newest date first; same-day records keep their order."""
    return sorted(records, key=lambda tx: tx.date, reverse=True)
