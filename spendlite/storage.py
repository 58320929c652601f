"""JSON blob storage behind the transaction store.

Each key names one file under ``base_path`` holding a JSON array of
records. Writes land in a sibling ``.tmp`` file first and are moved into
place, so a crash mid-write never leaves a half-written array behind.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, TypeVar

from .exceptions import PersistenceError

STORAGE_KEY = "spendlite_transactions_v1.json"

RecordT = TypeVar("RecordT")

# What a record factory raises on a malformed payload: missing keys, wrong
# types, unknown enum values, unparseable decimals.
_RECORD_ERRORS = (KeyError, TypeError, ValueError, AttributeError, ArithmeticError)


class JSONStorage:
    """File-based key/value store holding one JSON array per key."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def path_for(self, resource: str) -> Path:
        return self._base_path / resource

    def load(self, resource: str) -> List[Dict[str, Any]]:
        """Return the raw array stored under ``resource``; a missing key is empty."""
        path = self.path_for(resource)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        if not isinstance(payload, list):
            raise PersistenceError(f"Expected list payload in {path}")
        return payload

    def load_records(
        self, resource: str, factory: Callable[[Dict[str, Any]], RecordT]
    ) -> List[RecordT]:
        """Load ``resource`` and hydrate every entry with ``factory``.

        A single malformed entry fails the whole load with a
        :class:`PersistenceError` naming its position, rather than dropping it
        and losing it on the next save.
        """
        records: List[RecordT] = []
        for index, payload in enumerate(self.load(resource)):
            try:
                records.append(factory(payload))
            except _RECORD_ERRORS as exc:
                label = payload.get("id") if isinstance(payload, dict) else None
                raise PersistenceError(
                    f"Malformed record #{index} (id={label!r}) in {self.path_for(resource)}: {exc!r}"
                ) from exc
        return records

    def save(self, resource: str, records: Iterable[Dict[str, Any]]) -> None:
        path = self.path_for(resource)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(list(records), handle, indent=2, ensure_ascii=False)
                handle.flush()
            temp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Unable to write to {path}") from exc
