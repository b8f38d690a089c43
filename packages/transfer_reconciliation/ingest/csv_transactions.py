"""Adapter for a multi-account transaction CSV export.

CSV header (required keys): ``date, amount, account_id``
Optional keys: ``id, description, category_type, category_id, category_name``

Each row becomes a record accepted by ``Transaction.model_validate``: the
category columns are folded into a single ``category`` mapping (or ``None``
when ``category_type`` is blank).
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime
from os import PathLike
from pathlib import Path
from typing import Any

from ..models import Transaction, load_transactions

REQUIRED_HEADERS: frozenset[str] = frozenset({"date", "amount", "account_id"})


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = re.sub(r"\s+", " ", value).strip()
    return cleaned if cleaned != "" else None


def _normalize_date(value: str | None) -> str | None:
    s = _clean_text(value)
    if s is None:
        return None
    # ISO first; MM/DD/YYYY and MM/DD/YY exports are converted.
    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y"):
        try:
            return datetime.strptime(s, fmt).date().isoformat()
        except ValueError:
            continue
    # Leave unparseable values for model validation to reject.
    return s


def to_records(rows: Iterable[Mapping[str, str]]) -> Iterator[dict[str, Any]]:
    """Convert CSV rows to ``Transaction`` input records, in input order."""

    for row in rows:
        category_type = _clean_text(row.get("category_type"))
        category: dict[str, Any] | None = None
        if category_type is not None:
            category = {
                "type": category_type,
                "id": _clean_text(row.get("category_id")),
                "name": _clean_text(row.get("category_name")),
            }
        amount_raw = row.get("amount")
        yield {
            "id": _clean_text(row.get("id")),
            "date": _normalize_date(row.get("date")),
            "amount": amount_raw.strip() if amount_raw is not None else None,
            "account_id": _clean_text(row.get("account_id")),
            "description": _clean_text(row.get("description")),
            "category_id": _clean_text(row.get("category_id")),
            "category": category,
        }


def load_transactions_csv(csv_path: str | PathLike[str]) -> list[Transaction]:
    """Read ``csv_path`` and return validated transactions.

    Raises ``csv.Error`` when the header is missing or lacks required columns,
    and ``pydantic.ValidationError`` for malformed rows.
    """

    p = Path(csv_path)
    with p.open(encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        headers = {h.strip() for h in (reader.fieldnames or []) if h}
        if not headers:
            raise csv.Error(f"CSV appears to have no header row: {csv_path}")
        missing = sorted(REQUIRED_HEADERS - headers)
        if missing:
            raise csv.Error("CSV header mismatch. Missing columns: " + ", ".join(missing))
        rows = (
            {(k or "").strip(): v for k, v in row.items()} for row in reader
        )
        return load_transactions(to_records(rows))


__all__ = ["REQUIRED_HEADERS", "to_records", "load_transactions_csv"]
