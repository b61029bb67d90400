"""Public API for the receipt_extraction package."""

from .dates import find_date, parse_with_layout
from .exceptions import ReceiptExtractionError, TaggerError
from .items import find_items
from .models import ExtractedReceipt, LineItem
from .pipeline import ReceiptExtractor, extract_receipt
from .reporting import (
    compute_confidence_score,
    items_to_frame,
    receipts_to_frame,
    spending_by_month,
    spending_by_store,
)
from .store import find_store_name
from .tagger import (
    ItemTagger,
    ModelTagger,
    NullTagger,
    fit_tagger,
    load_tagger,
    train_tagger,
)
from .totals import find_total
from .utils import split_lines

__version__ = "0.1.0"

__all__ = [
    "ExtractedReceipt",
    "LineItem",
    "ReceiptExtractor",
    "extract_receipt",
    "split_lines",
    "find_total",
    "find_date",
    "parse_with_layout",
    "find_store_name",
    "find_items",
    "ItemTagger",
    "ModelTagger",
    "NullTagger",
    "fit_tagger",
    "train_tagger",
    "load_tagger",
    "compute_confidence_score",
    "receipts_to_frame",
    "items_to_frame",
    "spending_by_store",
    "spending_by_month",
    "ReceiptExtractionError",
    "TaggerError",
]
