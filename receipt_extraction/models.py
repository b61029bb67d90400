"""Data models produced by the extraction pipeline."""

from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class LineItem:
    """A single purchased item parsed from one receipt line."""

    name: str
    unit_price: float
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class ExtractedReceipt:
    """Container for the fields parsed from one receipt text.

    ``total`` and ``date`` are ``None`` when nothing usable was found and
    ``store_name`` falls back to the unknown-store sentinel. Every instance
    is created fresh per extraction call.
    """

    store_name: str
    total: Optional[float] = None
    date: Optional[dt.date] = None
    items: list[LineItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with the date in ISO format."""
        return {
            "store_name": self.store_name,
            "total": self.total,
            "date": self.date.isoformat() if self.date else None,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class AmountCandidate:
    """A parsed keyword-adjacent amount and where it was matched."""

    value: float
    start: int
    end: int
    raw: str


@dataclass(frozen=True)
class DateCandidate:
    """A date-shaped token matched in the text, not yet parsed."""

    raw: str
    start: int
    end: int
