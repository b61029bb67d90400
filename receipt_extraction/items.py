"""Line item assembly from tagged receipt lines."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .models import LineItem
from .tagger import ITEM_PRICE, PRODUCT_NAME, QUANTITY, ItemTagger, TaggedToken, as_tagger
from .utils import parse_decimal, parse_quantity, strip_currency

logger = logging.getLogger(__name__)


def parse_price(token: str, currency_symbols: Iterable[str] | None = None) -> Optional[float]:
    """Return the price in ``token`` after removing currency symbols."""
    return parse_decimal(strip_currency(token, currency_symbols))


def assemble_item(
    tags: Iterable[TaggedToken], currency_symbols: Iterable[str] | None = None
) -> Optional[LineItem]:
    """Build a :class:`LineItem` from one line's ``(token, label)`` pairs.

    ``PRODUCT_NAME`` tokens are joined with spaces, a ``QUANTITY`` token
    replaces the default quantity of 1 and the last parseable ``ITEM_PRICE``
    token sets the price. Returns ``None`` unless both a name and a price
    were found. ``currency_symbols`` replaces the default symbols stripped
    from price tokens.
    """

    name_parts: list[str] = []
    quantity = 1
    price: Optional[float] = None

    for token, label in tags:
        if label == PRODUCT_NAME:
            name_parts.append(token)
        elif label == QUANTITY:
            qty = parse_quantity(token)
            if qty is not None:
                quantity = qty
        elif label == ITEM_PRICE:
            value = parse_price(token, currency_symbols)
            if value is not None:
                price = value
            else:
                logger.debug("Discarding unparseable price %r", token)

    name = " ".join(part.strip() for part in name_parts if part.strip())
    if not name or price is None:
        return None
    return LineItem(name=name, unit_price=price, quantity=quantity)


def find_items(
    lines: Iterable[str],
    tagger: ItemTagger | None = None,
    currency_symbols: Iterable[str] | None = None,
) -> list[LineItem]:
    """Extract line items from ``lines`` using ``tagger``.

    Each line yields at most one item and nothing carries over between
    lines. A tagger error on one line only drops that line.
    """

    tagger = as_tagger(tagger)
    symbols = None if currency_symbols is None else tuple(currency_symbols)
    items: list[LineItem] = []
    for line in lines:
        try:
            item = assemble_item(tagger.tag(line), symbols)
        except Exception as e:
            logger.debug("Tagger failed on line %r: %s", line, e)
            continue
        if item is not None:
            items.append(item)
    return items
