"""Tabular views and simple spending summaries over extracted receipts."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .config import DEFAULT_CONFIG
from .models import ExtractedReceipt

RECEIPT_COLUMNS = [
    "receipt_index",
    "store_name",
    "total",
    "date",
    "item_count",
]

LINE_ITEM_COLUMNS = [
    "receipt_index",
    "store_name",
    "date",
    "name",
    "quantity",
    "unit_price",
    "line_total",
]


def receipts_to_frame(receipts: Iterable[ExtractedReceipt]) -> pd.DataFrame:
    """Return one row per receipt."""
    rows = [
        {
            "receipt_index": idx,
            "store_name": r.store_name,
            "total": r.total,
            "date": pd.Timestamp(r.date) if r.date else pd.NaT,
            "item_count": len(r.items),
        }
        for idx, r in enumerate(receipts)
    ]
    df = pd.DataFrame(rows, columns=RECEIPT_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df


def items_to_frame(receipts: Iterable[ExtractedReceipt]) -> pd.DataFrame:
    """Return one row per line item, tagged with its receipt."""
    rows = [
        {
            "receipt_index": idx,
            "store_name": r.store_name,
            "date": pd.Timestamp(r.date) if r.date else pd.NaT,
            "name": item.name,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "line_total": item.line_total,
        }
        for idx, r in enumerate(receipts)
        for item in r.items
    ]
    df = pd.DataFrame(rows, columns=LINE_ITEM_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df


def spending_by_store(receipts: Iterable[ExtractedReceipt]) -> pd.Series:
    """Sum receipt totals per store, largest first. Receipts without a total are skipped."""
    df = receipts_to_frame(receipts).dropna(subset=["total"])
    return (
        df.groupby("store_name")["total"].sum().round(2).sort_values(ascending=False)
    )


def spending_by_month(receipts: Iterable[ExtractedReceipt]) -> pd.Series:
    """Sum receipt totals per calendar month (``YYYY-MM``), oldest first.

    Receipts missing either a total or a date are skipped.
    """

    df = receipts_to_frame(receipts).dropna(subset=["total", "date"])
    months = df["date"].dt.strftime("%Y-%m")
    return df.groupby(months)["total"].sum().round(2).sort_index().rename_axis("month")


def compute_confidence_score(
    receipt: ExtractedReceipt, unknown_store: str = DEFAULT_CONFIG["unknown_store"]
) -> float:
    """Return a heuristic confidence score for an extracted ``receipt``.

    ``unknown_store`` is the sentinel the receipt was extracted with; a store
    name equal to it does not count as found.
    """

    checks: list[float] = []

    key_fields = [
        bool(receipt.store_name and receipt.store_name != unknown_store),
        receipt.total is not None,
        receipt.date is not None,
        bool(receipt.items),
    ]
    checks.append(sum(key_fields) / len(key_fields))

    if receipt.items and receipt.total is not None:
        item_sum = round(sum(item.line_total for item in receipt.items), 2)
        sum_ok = abs(item_sum - receipt.total) <= 0.02
        checks.append(1.0 if sum_ok else 0.0)

    return round(sum(checks) / len(checks), 2)
