"""Store name detection from the top of the receipt."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .config import DEFAULT_CONFIG
from .dates import is_date_token
from .utils import is_separator_line

logger = logging.getLogger(__name__)

UNKNOWN_STORE: str = DEFAULT_CONFIG["unknown_store"]
STORE_LINE_LIMIT: int = DEFAULT_CONFIG["store_line_limit"]
NOISE_TOKENS: frozenset[str] = frozenset(DEFAULT_CONFIG["noise_tokens"])


def find_store_name(
    lines: Sequence[str],
    noise_tokens: Iterable[str] | None = None,
    max_lines: int = STORE_LINE_LIMIT,
    default: str = UNKNOWN_STORE,
) -> str:
    """Return the first plausible store name among the top ``max_lines`` lines.

    A line is skipped when it is a noise token such as ``DATE`` or a weekday,
    when it is entirely a date, or when it only contains separator characters
    like ``*****``. The first surviving line wins; ``default`` is returned if
    none survives.
    """

    noise = NOISE_TOKENS if noise_tokens is None else frozenset(t.upper() for t in noise_tokens)
    top = [line for line in lines if line and line.strip()][:max_lines]
    for line in top:
        candidate = line.strip()
        if candidate.upper() in noise:
            continue
        if is_date_token(candidate):
            continue
        if is_separator_line(candidate):
            continue
        return candidate
    logger.debug("No store name among %d top lines", len(top))
    return default
