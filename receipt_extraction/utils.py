"""Utility functions shared by the receipt finders."""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional

from .config import DEFAULT_CONFIG

CURRENCY_SYMBOLS: list[str] = list(DEFAULT_CONFIG["currency_symbols"])

# Characters that make up decorative separator lines, e.g. "*****" or "-----"
SEPARATOR_LINE_RE = re.compile(r"^[\s*\-=_~#.+]+$")


def split_lines(raw_text: str) -> list[str]:
    """Split OCR text into trimmed, non-empty lines in their original order."""
    if not raw_text:
        return []
    lines = (line.strip() for line in raw_text.splitlines())
    return [line for line in lines if line]


def currency_pattern(symbols: Iterable[str] | None = None) -> str:
    """Return a regex alternation matching any of ``symbols``."""
    symbols = CURRENCY_SYMBOLS if symbols is None else list(symbols)
    # Longest first so multi-character symbols win over their prefixes
    ordered = sorted((s for s in symbols if s), key=len, reverse=True)
    return "|".join(re.escape(s) for s in ordered)


def strip_currency(token: str, symbols: Iterable[str] | None = None) -> str:
    """Remove currency symbols from ``token``."""
    symbols = CURRENCY_SYMBOLS if symbols is None else symbols
    # Longest first so multi-character symbols are removed whole
    for symbol in sorted((s for s in symbols if s), key=len, reverse=True):
        token = token.replace(symbol, "")
    return token.strip()


def parse_decimal(s: str) -> Optional[float]:
    """Parse ``s`` as a float, accepting a comma decimal separator.

    Returns ``None`` when ``s`` is empty, unparseable or not finite.
    """

    if not s:
        return None
    s = s.strip().replace(",", ".")
    try:
        value = float(s)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_quantity(s: str) -> Optional[int]:
    """Parse a quantity token as an integer, truncating decimals."""
    try:
        return int(s)
    except ValueError:
        pass
    value = parse_decimal(s)
    if value is None:
        return None
    return int(value)


def is_separator_line(line: str) -> bool:
    """Return ``True`` when ``line`` only holds decorative separator characters."""
    return bool(SEPARATOR_LINE_RE.match(line))
