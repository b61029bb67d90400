"""Receipt extraction pipeline combining all field finders."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .config import CONFIG, DEFAULT_CONFIG
from .dates import DATE_LAYOUTS, find_date
from .items import find_items
from .models import ExtractedReceipt
from .store import NOISE_TOKENS, STORE_LINE_LIMIT, UNKNOWN_STORE, find_store_name
from .tagger import ItemTagger, as_tagger, load_tagger
from .totals import compile_total_pattern, find_total
from .utils import split_lines

logger = logging.getLogger(__name__)


def _coerce_text(raw_text: Any) -> str:
    if raw_text is None:
        return ""
    if isinstance(raw_text, (bytes, bytearray)):
        return bytes(raw_text).decode("utf-8", errors="replace")
    return str(raw_text)


class ReceiptExtractor:
    """Turn raw OCR text into an :class:`ExtractedReceipt`.

    The extractor holds only read-only settings and the item tagger, so a
    single instance can serve concurrent callers. Load the tagger once up
    front; when it is missing, items come back empty and every other field
    is still extracted.
    """

    def __init__(
        self,
        tagger: Optional[ItemTagger] = None,
        total_keywords: Iterable[str] | None = None,
        currency_symbols: Iterable[str] | None = None,
        date_layouts: Iterable[str] | None = None,
        noise_tokens: Iterable[str] | None = None,
        store_line_limit: int = STORE_LINE_LIMIT,
        unknown_store: str = UNKNOWN_STORE,
    ):
        self.tagger = as_tagger(tagger)
        self.currency_symbols = None if currency_symbols is None else tuple(currency_symbols)
        self.total_pattern = compile_total_pattern(total_keywords, self.currency_symbols)
        self.date_layouts = tuple(DATE_LAYOUTS if date_layouts is None else date_layouts)
        self.noise_tokens = (
            NOISE_TOKENS
            if noise_tokens is None
            else frozenset(t.upper() for t in noise_tokens)
        )
        self.store_line_limit = store_line_limit
        self.unknown_store = unknown_store
        if not self.tagger.available:
            logger.debug("No item tagger available; line items will be empty")

    @classmethod
    def from_config(
        cls, config: dict | None = None, tagger: Optional[ItemTagger] = None
    ) -> "ReceiptExtractor":
        """Build an extractor from a configuration dict.

        Missing keys fall back to :data:`DEFAULT_CONFIG`. The tagger is loaded
        from ``tagger_model_path`` unless one is passed explicitly.
        """

        cfg = CONFIG if config is None else {**DEFAULT_CONFIG, **config}
        if tagger is None:
            tagger = load_tagger(cfg.get("tagger_model_path"))
        return cls(
            tagger=tagger,
            total_keywords=cfg["total_keywords"],
            currency_symbols=cfg["currency_symbols"],
            date_layouts=cfg["date_layouts"],
            noise_tokens=cfg["noise_tokens"],
            store_line_limit=int(cfg["store_line_limit"]),
            unknown_store=str(cfg["unknown_store"]),
        )

    def extract(self, raw_text: str) -> ExtractedReceipt:
        """Extract store name, total, date and line items from ``raw_text``.

        Never raises: fields that cannot be found are ``None`` (or the
        unknown-store sentinel) and items may be empty.
        """

        text = _coerce_text(raw_text)
        lines = split_lines(text)

        receipt = ExtractedReceipt(
            store_name=find_store_name(
                lines,
                noise_tokens=self.noise_tokens,
                max_lines=self.store_line_limit,
                default=self.unknown_store,
            ),
            total=find_total(text, pattern=self.total_pattern),
            date=find_date(text, layouts=self.date_layouts),
            items=find_items(lines, self.tagger, self.currency_symbols),
        )
        logger.debug(
            "Extracted store=%r total=%s date=%s items=%d",
            receipt.store_name,
            receipt.total,
            receipt.date,
            len(receipt.items),
        )
        return receipt


def extract_receipt(raw_text: str, tagger: Optional[ItemTagger] = None) -> ExtractedReceipt:
    """Extract a receipt with the default settings."""
    return ReceiptExtractor(tagger=tagger).extract(raw_text)
