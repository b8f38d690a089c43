"""Data models and type aliases for ``transfer_reconciliation``.

Input records are validated once at the data boundary into immutable
:class:`Transaction` models. The category relation, which upstream joins hand
over as ``None``, a single object or a one-element list, is collapsed to a
single optional :class:`Category` during validation so the reconciliation
engine never has to sniff shapes at runtime.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal, NamedTuple, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .categories import CATEGORY_TYPES, resolve_category

type CategoryType = Literal["expense", "income", "transfer"]


class Category(BaseModel):
    """A category reference. Only ``type`` is consulted by the engine.

    A missing, ``None`` or unrecognized type loads as ``type=None``: the row
    is kept and treated as "not a transfer" rather than failing the batch.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    type: CategoryType | None = None
    id: str | None = None
    name: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, v: Any) -> str | None:
        if not isinstance(v, str):
            return None
        v = v.strip().lower()
        return v if v in CATEGORY_TYPES else None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


class Transaction(BaseModel):
    """A single account transaction as seen by the reconciliation engine.

    ``amount`` is signed in major currency units (negative = outflow).
    ``account_id`` is opaque and compared only for equality.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    amount: Decimal
    date: dt.date
    account_id: str = Field(validation_alias=AliasChoices("account_id", "accountId"))
    category: Category | None = Field(
        default=None, validation_alias=AliasChoices("category", "categories")
    )
    id: str | None = None
    description: str | None = None
    category_id: str | None = Field(
        default=None, validation_alias=AliasChoices("category_id", "categoryId")
    )

    @field_validator("category", mode="before")
    @classmethod
    def _collapse_category(cls, v: Any) -> Any:
        resolved = resolve_category(v)
        if resolved is None or isinstance(resolved, (Category, Mapping)):
            return resolved
        # Attribute objects (e.g. ORM rows) carry the same fields.
        return {key: getattr(resolved, key, None) for key in ("type", "id", "name")}

    @field_validator("account_id", "id", "category_id", mode="before")
    @classmethod
    def _ids_as_str(cls, v: Any) -> Any:
        # Numeric ids from JSON/DB rows are compared as strings.
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class TransactionLike(Protocol):
    """Structural type accepted by the matcher and filters."""

    @property
    def amount(self) -> Decimal | float: ...

    @property
    def date(self) -> dt.date: ...

    @property
    def account_id(self) -> str: ...

    @property
    def category(self) -> Any: ...


# Generic collections
type Transactions = Sequence[Transaction]
"""An ordered batch of transactions; indices refer to positions in it."""


class ConfirmedPair(NamedTuple):
    """Two batch indices that together form one confirmed transfer.

    ``anchor`` is the transfer-labeled leg that initiated the search;
    ``counterpart`` is the opposite leg (possibly uncategorized).
    """

    anchor: int
    counterpart: int


class TransferPair(NamedTuple):
    """An outflow/inflow pair detected by the transfer linker."""

    outflow_id: str
    inflow_id: str
    outflow_account_id: str
    inflow_account_id: str
    amount: Decimal
    date: dt.date


@dataclass(frozen=True, slots=True)
class MonthlyTotals:
    """Income/expense totals for a calendar month (``YYYY-MM``)."""

    month: str
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


def load_transactions(records: Iterable[Mapping[str, Any]]) -> list[Transaction]:
    """Validate raw mapping records into :class:`Transaction` models.

    Raises ``pydantic.ValidationError`` on malformed records (e.g. a date
    that is not ``YYYY-MM-DD``).
    """

    return [Transaction.model_validate(r) for r in records]


__all__ = [
    "Category",
    "CategoryType",
    "ConfirmedPair",
    "MonthlyTotals",
    "Transaction",
    "TransactionLike",
    "Transactions",
    "TransferPair",
    "load_transactions",
]
