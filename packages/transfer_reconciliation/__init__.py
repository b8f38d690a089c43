"""Public interface for the ``transfer_reconciliation`` package.

This module re-exports the reconciliation engine, its filtering policies and
the public models as the stable import surface. There is no runtime logic
here, only symbol re-exports.
"""

from .buckets import amount_bucket_key, build_amount_buckets
from .cache import TransferCategoryIdCache
from .categories import is_transfer_category, is_transfer_tx, resolve_category
from .detector import detect_transfer_pairs
from .filters import exclude_all_transfers, exclude_transfers, exclude_transfers_by_category
from .matching import TRANSFER_WINDOW, confirmed_transfer_indices, confirmed_transfer_pairs
from .models import (
    Category,
    ConfirmedPair,
    MonthlyTotals,
    Transaction,
    Transactions,
    TransferPair,
    load_transactions,
)
from .reports import income_expense_report

__all__ = [
    # Engine
    "amount_bucket_key",
    "build_amount_buckets",
    "confirmed_transfer_indices",
    "confirmed_transfer_pairs",
    "TRANSFER_WINDOW",
    # Filters
    "exclude_all_transfers",
    "exclude_transfers_by_category",
    "exclude_transfers",
    # Categories / cache
    "resolve_category",
    "is_transfer_category",
    "is_transfer_tx",
    "TransferCategoryIdCache",
    # Linking / reporting
    "detect_transfer_pairs",
    "income_expense_report",
    # Models / types
    "Category",
    "ConfirmedPair",
    "MonthlyTotals",
    "Transaction",
    "Transactions",
    "TransferPair",
    "load_transactions",
]
