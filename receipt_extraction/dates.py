"""Transaction date detection."""

from __future__ import annotations

import datetime as dt
import logging
import re
from functools import lru_cache
from typing import Iterable, Iterator, Optional

from .config import DEFAULT_CONFIG
from .models import DateCandidate

logger = logging.getLogger(__name__)

# Day/month first (01/02/2024, 1.2.24) or ISO-like (2024-02-01, 2024.02.01)
DATE_TOKEN = r"\d{1,2}[./-]\d{1,2}[./-]\d{2,4}|\d{4}[-/.]\d{1,2}[-/.]\d{1,2}"
DATE_RE = re.compile(rf"\b({DATE_TOKEN})\b")
DATE_ONLY_RE = re.compile(rf"^(?:{DATE_TOKEN})$")

# Tried in order; day-first wins over month-first for ambiguous tokens
DATE_LAYOUTS: list[str] = list(DEFAULT_CONFIG["date_layouts"])

_LAYOUT_FIELDS = {"yyyy": "%Y", "yy": "%y", "MM": "%m", "dd": "%d"}
_LAYOUT_FIELD_RE = re.compile(r"yyyy|yy|MM|dd")


@lru_cache(maxsize=None)
def layout_to_strptime(layout: str) -> str:
    """Translate a ``dd/MM/yyyy`` style layout to a ``strptime`` format."""
    literal = layout.replace("%", "%%")
    return _LAYOUT_FIELD_RE.sub(lambda m: _LAYOUT_FIELDS[m.group(0)], literal)


def parse_with_layout(token: str, layout: str) -> Optional[dt.date]:
    """Parse ``token`` with a single ``layout``.

    ``yyyy`` requires a four-digit year and ``yy`` a two-digit one; day and
    month accept one or two digits. Returns ``None`` instead of raising when
    the token does not fit the layout or is not a real calendar date.
    """

    try:
        return dt.datetime.strptime(token, layout_to_strptime(layout)).date()
    except ValueError:
        return None


def is_date_token(text: str) -> bool:
    """Return ``True`` when the whole of ``text`` is a date-shaped token."""
    return bool(DATE_ONLY_RE.match(text.strip()))


def find_date_candidates(raw_text: str) -> Iterator[DateCandidate]:
    """Yield date-shaped tokens in the order they appear."""
    for m in DATE_RE.finditer(raw_text or ""):
        yield DateCandidate(raw=m.group(1), start=m.start(1), end=m.end(1))


def find_date(raw_text: str, layouts: Iterable[str] | None = None) -> Optional[dt.date]:
    """Return the first date in ``raw_text`` that parses under any layout.

    Tokens are tried in text order and, for each token, layouts in list
    order. The first success is returned without looking at later tokens,
    so an ambiguous token such as ``03/04/2024`` resolves by layout order.
    """

    layouts = DATE_LAYOUTS if layouts is None else list(layouts)
    for candidate in find_date_candidates(raw_text):
        for layout in layouts:
            parsed = parse_with_layout(candidate.raw, layout)
            if parsed is not None:
                return parsed
        logger.debug("Discarding unparseable date token %r", candidate.raw)
    return None
