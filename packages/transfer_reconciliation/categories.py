"""Category helpers shared by the matcher, the filters and the data boundary.

Exports
-------
- ``resolve_category(raw)``: collapse a category relation that may arrive as
  ``None``, a single object or a one-element collection into one optional
  value.
- ``category_type(tx)`` / ``is_transfer_category(cat)`` / ``is_transfer_tx(tx)``:
  type lookups used by the reconciliation engine.
- ``load_transfer_category_ids(session)``: ids of every ``transfer``-typed row
  in ``fa_categories`` (the loader behind ``TransferCategoryIdCache``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from db.models.finance import CATEGORY_TYPES, FaCategory
from sqlalchemy import select
from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from .models import TransactionLike

T = TypeVar("T")

TRANSFER = "transfer"
INCOME = "income"


def resolve_category(raw: T | list[T] | tuple[T, ...] | None) -> T | None:
    """Return the single category carried by ``raw`` or ``None``.

    Collections yield their first element; an empty collection yields
    ``None``. Never raises.
    """

    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return raw[0] if raw else None
    return raw


def _type_of(category: Any) -> str | None:
    if category is None:
        return None
    if isinstance(category, Mapping):
        value = category.get("type")
    else:
        value = getattr(category, "type", None)
    return value if isinstance(value, str) else None


def category_type(tx: TransactionLike) -> str | None:
    """Resolved category type of ``tx`` (``None`` when uncategorized)."""

    return _type_of(resolve_category(tx.category))


def is_transfer_category(category: Any) -> bool:
    return _type_of(resolve_category(category)) == TRANSFER


def is_transfer_tx(tx: TransactionLike) -> bool:
    return category_type(tx) == TRANSFER


def load_transfer_category_ids(session: Session) -> list[str]:
    """Return ids of all ``transfer``-typed categories, ordered by id."""

    rows = session.execute(
        select(FaCategory.id).where(FaCategory.type == TRANSFER).order_by(FaCategory.id)
    ).scalars()
    return [str(r) for r in rows]


__all__ = [
    "TRANSFER",
    "INCOME",
    "CATEGORY_TYPES",
    "resolve_category",
    "category_type",
    "is_transfer_category",
    "is_transfer_tx",
    "load_transfer_category_ids",
]
