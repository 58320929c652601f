"""Validation helpers shared by the interactive add and edit paths."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional, Union
from uuid import uuid4

from .exceptions import ValidationError
from .models import Transaction, TransactionKind, parse_iso_date, quantize_cents

KIND_VALUES = {kind.value for kind in TransactionKind}


def new_transaction_id() -> str:
    """Return a fresh random identifier (uuid4, 122 random bits)."""
    return str(uuid4())


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a positive Decimal with exactly two fraction digits."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")

    return quantize_cents(amount)


def validate_required_str(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    return trimmed


def validate_optional_str(value: object, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


def validate_enum(value: object, field: str, allowed: Iterable[str]) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    if canonical not in allowed:
        raise ValidationError(f"{field} must be one of: {', '.join(sorted(allowed))}")
    return canonical


def validate_kind(value: object) -> TransactionKind:
    if isinstance(value, TransactionKind):
        return value
    return TransactionKind(validate_enum(value, "type", KIND_VALUES))


def validate_iso_date(value: object, field: str, *, default: Optional[str] = None) -> str:
    """Truncate ``value`` to ``YYYY-MM-DD``; blank values fall back to ``default``."""
    text = "" if value is None else str(value).strip()
    if not text:
        if default is None:
            raise ValidationError(f"{field} cannot be empty")
        text = default
    try:
        return parse_iso_date(text)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD form") from exc


def normalize(
    raw: Union[Mapping[str, Any], Transaction],
    *,
    today: str,
    transaction_id: Optional[str] = None,
) -> Transaction:
    """Validate a raw payload and return the canonical transaction.

    ``today`` is the ``YYYY-MM-DD`` date used when the payload has no date;
    callers own the clock. The id is ``transaction_id`` when given, then the
    payload's own ``id``, then a freshly generated one.
    """
    if isinstance(raw, Transaction):
        raw = raw.to_dict()
    kind = raw.get("type", raw.get("kind"))
    identifier = transaction_id or str(raw.get("id") or "").strip() or new_transaction_id()
    return Transaction(
        id=identifier,
        kind=validate_kind(kind),
        category=validate_required_str(raw.get("category"), "category"),
        amount=parse_amount(raw.get("amount"), "amount"),
        date=validate_iso_date(raw.get("date"), "date", default=today),
        note=validate_optional_str(raw.get("note"), "note"),
    )
