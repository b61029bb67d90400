"""Total amount detection.

Receipts usually print a subtotal, tax lines and the grand total next to
similar keywords. Every keyword-adjacent number is collected and the largest
one is returned, which is the grand total on the vast majority of receipts.
A tax-inclusive subtotal or a keyword false positive larger than the real
total will win instead; callers get a best guess, not a verified total.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Optional

from .config import DEFAULT_CONFIG
from .models import AmountCandidate
from .utils import currency_pattern, parse_decimal

logger = logging.getLogger(__name__)

TOTAL_KEYWORDS: list[str] = list(DEFAULT_CONFIG["total_keywords"])

# Used when no keyword is configured; nothing then counts as a total
NEVER_MATCH_RE = re.compile(r"(?!)")


def compile_total_pattern(
    keywords: Iterable[str] | None = None,
    currency_symbols: Iterable[str] | None = None,
) -> re.Pattern[str]:
    """Build the case-insensitive keyword + amount regex.

    A keyword is followed by optional ``:``/``=`` separators, whitespace and
    a currency symbol, then ``digits[.,]digits{1,2}`` or a bare integer.
    """

    keywords = TOTAL_KEYWORDS if keywords is None else list(keywords)
    # Longest first so "totale" is preferred over "total"
    ordered = sorted((k.strip() for k in keywords if k.strip()), key=len, reverse=True)
    if not ordered:
        return NEVER_MATCH_RE
    keyword_alt = "|".join(r"\s+".join(map(re.escape, k.split())) for k in ordered)
    currency = currency_pattern(currency_symbols)
    currency_part = rf"(?:(?:{currency})\s*)?" if currency else ""
    # Each whitespace run follows a consumed token, so runs never overlap
    return re.compile(
        rf"(?:{keyword_alt})\s*(?:[:=]\s*)?{currency_part}"
        r"(\d+(?:[.,]\d{1,2})?)",
        re.IGNORECASE,
    )


TOTAL_RE = compile_total_pattern()


def find_amount_candidates(
    raw_text: str, pattern: re.Pattern[str] | None = None
) -> Iterator[AmountCandidate]:
    """Yield every parseable keyword-adjacent amount in ``raw_text``."""
    pattern = pattern or TOTAL_RE
    for m in pattern.finditer(raw_text or ""):
        raw = m.group(1)
        value = parse_decimal(raw)
        if value is None:
            logger.debug("Discarding unparseable amount %r", raw)
            continue
        yield AmountCandidate(value=value, start=m.start(1), end=m.end(1), raw=raw)


def find_total(
    raw_text: str,
    keywords: Iterable[str] | None = None,
    pattern: re.Pattern[str] | None = None,
) -> Optional[float]:
    """Return the largest keyword-adjacent amount in ``raw_text``.

    Parameters
    ----------
    raw_text:
        Full OCR text of the receipt.
    keywords:
        Optional keyword synonyms replacing :data:`TOTAL_KEYWORDS`.
    pattern:
        Precompiled pattern from :func:`compile_total_pattern`; takes
        precedence over ``keywords``.

    Returns
    -------
    Optional[float]
        The maximum candidate, or ``None`` when no keyword is followed by a
        parseable number.
    """

    if pattern is None and keywords is not None:
        pattern = compile_total_pattern(keywords)
    values = [c.value for c in find_amount_candidates(raw_text, pattern)]
    if not values:
        return None
    return max(values)
