"""Core ledger package: records, filters, aggregation, CSV interchange."""

from .aggregation import category_names, category_totals, monthly_series, summary
from .exceptions import MissingColumnsError, PersistenceError, RecordNotFoundError, ValidationError
from .filters import apply_filters, sort_recent_first
from .models import CategoryTotal, FilterSpec, MonthlyBucket, Summary, Transaction, TransactionKind
from .storage import JSONStorage
from .store import TransactionStore
from .validators import normalize

__all__ = [
    "CategoryTotal",
    "FilterSpec",
    "MonthlyBucket",
    "Summary",
    "Transaction",
    "TransactionKind",
    "TransactionStore",
    "JSONStorage",
    "apply_filters",
    "sort_recent_first",
    "summary",
    "monthly_series",
    "category_totals",
    "category_names",
    "normalize",
    "MissingColumnsError",
    "PersistenceError",
    "RecordNotFoundError",
    "ValidationError",
]
