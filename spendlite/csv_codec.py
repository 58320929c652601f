"""CSV export and import for the transaction collection.

Import is deliberately more lenient than interactive entry: rows are not run
through :func:`spendlite.validators.normalize`. Unknown types become expenses,
unparseable or negative amounts become zero, and a blank category becomes
``Other``, so a hand-edited spreadsheet still imports whole.
"""

from __future__ import annotations

import csv
import io
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Sequence

from .exceptions import MissingColumnsError, ValidationError
from .logging_setup import get_logger
from .models import Transaction, TransactionKind, ZERO, format_amount, quantize_cents
from .validators import new_transaction_id

__all__ = [
    "CSV_COLUMNS",
    "CSV_MIME_TYPE",
    "EXPORT_FILENAME",
    "REQUIRED_COLUMNS",
    "decode",
    "encode",
]

logger = get_logger(__name__)

CSV_COLUMNS = ("id", "type", "category", "amount", "date", "note")
REQUIRED_COLUMNS = ("id", "type", "category", "amount", "date")
DEFAULT_CATEGORY = "Other"

EXPORT_FILENAME = "spendlite.csv"
CSV_MIME_TYPE = "text/csv; charset=utf-8"

_QUOTE_TRIGGERS = (",", '"', "\n", "\r")


def encode(records: Iterable[Transaction]) -> str:
    """Render records as CSV text with a fixed header, in collection order.

    Rows end with ``\\n``. A field holding a comma, a double quote, ``\\n`` or
    ``\\r`` is quoted with inner quotes doubled, so every character survives
    :func:`decode`.
    """
    lines = [",".join(CSV_COLUMNS)]
    for record in records:
        fields = (
            record.id,
            record.kind.value,
            record.category,
            format_amount(record.amount),
            record.date,
            record.note,
        )
        lines.append(",".join(_escape_field(value) for value in fields))
    return "\n".join(lines) + "\n"


def decode(text: str, *, today: str) -> List[Transaction]:
    """Parse CSV text into transactions ready for ``TransactionStore.merge_import``.

    Only ``\\n`` ends a row; ``\\r`` outside quotes is ignored. When a header
    name repeats, its last column is used. Raises :class:`MissingColumnsError`
    when the header lacks any of ``REQUIRED_COLUMNS`` and
    :class:`ValidationError` when the text is not parseable CSV; no rows are
    returned in either case.
    """
    reader = csv.reader(io.StringIO(_drop_bare_carriage_returns(text), newline=""))
    try:
        rows = [row for row in reader if row]
    except csv.Error as exc:
        raise ValidationError(f"Malformed CSV near line {reader.line_num}: {exc}") from exc

    header = list(rows[0]) if rows else []
    if header:
        # Spreadsheet exports often prefix the file with a UTF-8 byte order mark.
        header[0] = header[0].lstrip("\ufeff")
    positions = {name: index for index, name in enumerate(header)}

    missing = [column for column in REQUIRED_COLUMNS if column not in positions]
    if missing:
        raise MissingColumnsError(missing)

    decoded = [_decode_row(row, positions, today) for row in rows[1:]]
    logger.debug("Decoded %d transactions from CSV", len(decoded))
    return decoded


def _escape_field(value: str) -> str:
    if any(char in value for char in _QUOTE_TRIGGERS):
        return '"' + value.replace('"', '""') + '"'
    return value


def _drop_bare_carriage_returns(text: str) -> str:
    """Remove ``\\r`` outside quoted fields; quoted ones are field content."""
    kept = []
    quoted = False
    for char in text:
        if char == '"':
            # A doubled quote toggles twice and leaves the state unchanged.
            quoted = not quoted
        elif char == "\r" and not quoted:
            continue
        kept.append(char)
    return "".join(kept)


def _decode_row(row: Sequence[str], positions: Dict[str, int], today: str) -> Transaction:
    def cell(column: str) -> str:
        index = positions.get(column)
        if index is None or index >= len(row):
            return ""
        return row[index]

    kind = TransactionKind.INCOME if cell("type") == TransactionKind.INCOME.value else TransactionKind.EXPENSE
    return Transaction(
        id=cell("id") or new_transaction_id(),
        kind=kind,
        category=cell("category") or DEFAULT_CATEGORY,
        amount=_lenient_amount(cell("amount")),
        date=(cell("date") or today)[:10],
        note=cell("note"),
    )


def _lenient_amount(raw: str) -> Decimal:
    try:
        amount = Decimal(raw.strip() or "0")
    except InvalidOperation:
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return quantize_cents(amount)
