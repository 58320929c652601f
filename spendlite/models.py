"""Data models for the Spendlite ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Optional

from .exceptions import ValidationError

__all__ = [
    "KIND_ALL",
    "TransactionKind",
    "Transaction",
    "FilterSpec",
    "Summary",
    "MonthlyBucket",
    "CategoryTotal",
    "format_amount",
    "parse_iso_date",
    "quantize_cents",
]

KIND_ALL = "all"
ZERO = Decimal("0.00")


def quantize_cents(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Render an amount as a plain two-decimal string."""
    return f"{value:.2f}"


def parse_iso_date(value: str) -> str:
    """Return the ``YYYY-MM-DD`` prefix of ``value`` after checking it is a real date."""
    candidate = value.strip()[:10]
    # fromisoformat also accepts compact forms on newer interpreters; pin the shape.
    if len(candidate) != 10 or candidate[4] != "-" or candidate[7] != "-":
        raise ValueError(f"Invalid ISO date: {value!r}")
    date.fromisoformat(candidate)
    return candidate


def _filter_date(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        return ""
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD form") from exc


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Transaction:
    id: str
    kind: TransactionKind
    category: str
    amount: Decimal
    date: str
    note: str = ""

    @property
    def year_month(self) -> str:
        return self.date[:7]

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the transaction to JSON-friendly natives."""
        return {
            "id": self.id,
            "type": self.kind.value,
            "category": self.category,
            "amount": format_amount(self.amount),
            "date": self.date,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Hydrate a Transaction from persisted JSON-native data."""
        return cls(
            id=str(data["id"]),
            kind=TransactionKind(data["type"]),
            category=data["category"],
            amount=quantize_cents(Decimal(str(data["amount"]))),
            date=str(data["date"])[:10],
            note=data.get("note") or "",
        )


@dataclass(frozen=True)
class FilterSpec:
    """Narrowing criteria; ``kind=None`` matches both incomes and expenses."""

    kind: Optional[TransactionKind] = None
    category: str = ""
    date_from: str = ""
    date_to: str = ""
    search_text: str = ""

    @property
    def is_empty(self) -> bool:
        return self == FilterSpec()

    @classmethod
    def from_params(
        cls,
        kind: Optional[str] = None,
        category: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        search_text: Optional[str] = None,
    ) -> "FilterSpec":
        """Build a filter from raw user input, trimming and checking each field."""
        canonical = (kind or KIND_ALL).strip().lower() or KIND_ALL
        if canonical == KIND_ALL:
            parsed_kind = None
        else:
            try:
                parsed_kind = TransactionKind(canonical)
            except ValueError as exc:
                raise ValidationError("type must be one of: all, expense, income") from exc

        return cls(
            kind=parsed_kind,
            category=(category or "").strip(),
            date_from=_filter_date(date_from, "start"),
            date_to=_filter_date(date_to, "end"),
            search_text=(search_text or "").strip().lower(),
        )


@dataclass(frozen=True)
class Summary:
    income_total: Decimal = ZERO
    expense_total: Decimal = ZERO
    balance: Decimal = ZERO

    def to_dict(self) -> Dict[str, str]:
        return {
            "income_total": format_amount(self.income_total),
            "expense_total": format_amount(self.expense_total),
            "balance": format_amount(self.balance),
        }


@dataclass(frozen=True)
class MonthlyBucket:
    year_month: str
    income: Decimal
    expense: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "year_month": self.year_month,
            "income": format_amount(self.income),
            "expense": format_amount(self.expense),
        }


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {"category": self.category, "total": format_amount(self.total)}
