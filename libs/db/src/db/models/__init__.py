"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the account/category/transaction models read by
``transfer_reconciliation``.
"""

from .finance import Base, FaAccount, FaCategory, FaTransaction

__all__ = [
    "Base",
    "FaAccount",
    "FaCategory",
    "FaTransaction",
]
