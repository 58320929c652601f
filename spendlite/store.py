"""The transaction store: owner of the canonical record collection."""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from . import csv_codec
from .exceptions import PersistenceError, RecordNotFoundError
from .filters import apply_filters
from .logging_setup import get_logger
from .models import FilterSpec, Transaction
from .sample import sample_payloads
from .storage import STORAGE_KEY, JSONStorage
from .validators import new_transaction_id, normalize

logger = get_logger(__name__)


class TransactionStore:
    """Holds transactions in insertion order and persists after every mutation.

    Snapshots handed out are tuples or lists of frozen dataclasses; callers
    cannot change the collection except through the methods below.
    """

    def __init__(
        self,
        storage: JSONStorage,
        resource: str = STORAGE_KEY,
        *,
        clock: Optional[Callable[[], date]] = None,
    ) -> None:
        self._storage = storage
        self._resource = resource
        self._clock = clock or date.today
        self._transactions: Dict[str, Transaction] = {}
        self.load()  # Hydrate in-memory collection from persistence on construction.

    # Public API -----------------------------------------------------------
    def today(self) -> str:
        return self._clock().isoformat()

    def add(self, payload: Mapping[str, object]) -> Transaction:
        transaction = normalize(payload, today=self.today(), transaction_id=new_transaction_id())
        self._transactions[transaction.id] = transaction
        logger.info("Added %s %s of %s", transaction.kind.value, transaction.id, transaction.amount)
        self._persist()
        return transaction

    def update(self, transaction_id: str, changes: Mapping[str, object]) -> Transaction:
        existing = self._get_or_raise(transaction_id)
        # Merge existing serialised data with incoming changes to support partial edits.
        merged_payload = {**existing.to_dict(), **changes}
        updated = normalize(merged_payload, today=self.today(), transaction_id=existing.id)
        self._transactions[transaction_id] = updated
        logger.info("Updated transaction %s", transaction_id)
        self._persist()
        return updated

    def delete(self, transaction_id: str) -> None:
        self._get_or_raise(transaction_id)
        del self._transactions[transaction_id]
        logger.info("Deleted transaction %s", transaction_id)
        self._persist()

    def get(self, transaction_id: str) -> Transaction:
        """Return a transaction or raise if it does not exist."""
        return self._get_or_raise(transaction_id)

    def merge_import(self, records: Iterable[Transaction]) -> int:
        """Replace records sharing an id in place and append the rest.

        Re-importing the same records leaves the collection unchanged.
        """
        count = 0
        for record in records:
            # Assigning to an existing dict key keeps its original position.
            self._transactions[record.id] = record
            count += 1
        logger.info("Merged %d imported transactions", count)
        self._persist()
        return count

    def all(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions.values())

    def list(self, spec: Optional[FilterSpec] = None) -> List[Transaction]:
        return apply_filters(self._transactions.values(), spec)

    def load(self) -> None:
        """Load existing transactions from persistence."""
        loaded = self._storage.load_records(self._resource, Transaction.from_dict)
        self._transactions = {transaction.id: transaction for transaction in loaded}
        logger.debug("Loaded %d transactions from %s", len(self._transactions), self._resource)

    def load_sample(self) -> List[Transaction]:
        """Prepend the demo data set for the current month."""
        today = self.today()
        sample = [
            normalize(payload, today=today, transaction_id=new_transaction_id())
            for payload in sample_payloads(today)
        ]
        existing = self._transactions
        self._transactions = {transaction.id: transaction for transaction in sample}
        self._transactions.update(existing)
        self._persist()
        return sample

    def export_csv(self) -> str:
        return csv_codec.encode(self._transactions.values())

    def import_csv(self, text: str) -> int:
        """Decode ``text`` and merge it; nothing changes when the header is incomplete."""
        return self.merge_import(csv_codec.decode(text, today=self.today()))

    def __len__(self) -> int:
        return len(self._transactions)

    # Internal helpers -----------------------------------------------------
    def _persist(self) -> None:
        try:
            self._storage.save(
                self._resource, [transaction.to_dict() for transaction in self._transactions.values()]
            )
        except PersistenceError as exc:
            # The in-memory collection stays authoritative for the session.
            logger.warning("Could not save transactions: %s", exc)

    def _get_or_raise(self, transaction_id: str) -> Transaction:
        try:
            return self._transactions[transaction_id]
        except KeyError as exc:
            raise RecordNotFoundError(f"Transaction {transaction_id} not found") from exc
