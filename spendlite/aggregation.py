"""Summary totals and chart buckets derived from a record subset.

Amounts are already quantized ``Decimal`` cents, so plain ``sum`` over them is
exact no matter how many records a large import brings in.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from .models import CategoryTotal, MonthlyBucket, Summary, Transaction, TransactionKind, ZERO

__all__ = ["summary", "monthly_series", "category_totals", "category_names"]


def summary(records: Iterable[Transaction]) -> Summary:
    income = ZERO
    expense = ZERO
    for record in records:
        if record.kind is TransactionKind.INCOME:
            income += record.amount
        else:
            expense += record.amount
    return Summary(income_total=income, expense_total=expense, balance=income - expense)


def monthly_series(records: Iterable[Transaction]) -> List[MonthlyBucket]:
    """Income and expense per ``YYYY-MM``, ascending; empty months are not synthesised."""
    buckets: Dict[str, Tuple[Decimal, Decimal]] = {}
    for record in records:
        income, expense = buckets.get(record.year_month, (ZERO, ZERO))
        if record.kind is TransactionKind.INCOME:
            income += record.amount
        else:
            expense += record.amount
        buckets[record.year_month] = (income, expense)

    return [
        MonthlyBucket(year_month=month, income=income, expense=expense)
        for month, (income, expense) in sorted(buckets.items())
    ]


def category_totals(records: Iterable[Transaction]) -> List[CategoryTotal]:
    """Expense totals per exact category name, largest first."""
    totals: Dict[str, Decimal] = {}
    for record in records:
        if record.kind is not TransactionKind.EXPENSE:
            continue
        totals[record.category] = totals.get(record.category, ZERO) + record.amount

    # sorted() is stable with reverse=True, so ties keep first-seen order.
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=name, total=total) for name, total in ranked]


def category_names(records: Iterable[Transaction]) -> List[str]:
    return sorted({record.category for record in records}, key=lambda name: (name.lower(), name))
