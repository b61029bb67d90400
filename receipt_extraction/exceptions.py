"""Exceptions raised by the receipt_extraction package.

Extraction itself never raises; these only surface from the tagger
training helpers when the training data cannot be used.
"""


class ReceiptExtractionError(Exception):
    """Base class for package errors."""


class TaggerError(ReceiptExtractionError, ValueError):
    """Training data for the item tagger is missing or malformed."""
