"""Word tagging models for receipt line items.

A tagger labels every token of a receipt line as ``PRODUCT_NAME``,
``QUANTITY``, ``ITEM_PRICE`` or outside (``None``). The trained variant wraps
a scikit-learn pipeline stored with joblib; :class:`NullTagger` stands in
when no model could be loaded so item extraction quietly yields nothing.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import joblib
import pandas as pd
from sklearn.feature_extraction import DictVectorizer
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline

from .exceptions import TaggerError
from .utils import currency_pattern

logger = logging.getLogger(__name__)

PRODUCT_NAME = "PRODUCT_NAME"
QUANTITY = "QUANTITY"
ITEM_PRICE = "ITEM_PRICE"
OUTSIDE = "O"
LABELS = (PRODUCT_NAME, QUANTITY, ITEM_PRICE, OUTSIDE)

MODEL_PATH = Path("item_tagger.joblib")
TRAINING_COLUMNS = ("line_id", "token", "label")

TaggedToken = tuple[str, Optional[str]]

# Punctuation stripped from token edges; currency symbols and signs stay.
# A leading "." is kept so ".50" stays a price; a trailing one is sentence noise.
_EDGE_PUNCTUATION = "\"'`()[]{}<>,;:!?*|"

_CURRENCY = currency_pattern()
_PRICE_RE = re.compile(rf"^-?(?:{_CURRENCY})?\d*[.,]\d{{1,2}}(?:{_CURRENCY})?$", re.I)
_INT_RE = re.compile(r"^\d+$")
_MULTIPLIER_RE = re.compile(r"^(?:[x×*]\d+|\d+[x×*])$", re.I)
_CURRENCY_RE = re.compile(_CURRENCY, re.I)


def tokenize(line: str) -> list[str]:
    """Split ``line`` on whitespace and trim punctuation from token edges."""
    tokens = (
        raw.lstrip(_EDGE_PUNCTUATION).rstrip(_EDGE_PUNCTUATION + ".") for raw in line.split()
    )
    return [tok for tok in tokens if tok]


def _shape(word: str) -> str:
    shape = []
    for ch in word:
        if ch.isupper():
            c = "X"
        elif ch.islower():
            c = "x"
        elif ch.isdigit():
            c = "d"
        else:
            c = ch
        if not shape or shape[-1] != c:
            shape.append(c)
    return "".join(shape)


def token_features(tokens: Sequence[str], index: int) -> dict[str, object]:
    """Return the feature dict describing ``tokens[index]`` in its line."""

    word = tokens[index]
    last = len(tokens) - 1
    features: dict[str, object] = {
        "bias": 1.0,
        "word.lower": word.lower(),
        "word.shape": _shape(word),
        "word.is_alpha": word.isalpha(),
        "word.is_int": bool(_INT_RE.match(word)),
        "word.is_price": bool(_PRICE_RE.match(word)),
        "word.is_multiplier": bool(_MULTIPLIER_RE.match(word)),
        "word.has_currency": bool(_CURRENCY_RE.search(word)),
        "word.has_digit": any(ch.isdigit() for ch in word),
        "position.first": index == 0,
        "position.last": index == last,
        "position.relative": index / last if last else 0.0,
    }
    if index > 0:
        prev = tokens[index - 1]
        features["prev.lower"] = prev.lower()
        features["prev.shape"] = _shape(prev)
    else:
        features["BOS"] = True
    if index < last:
        nxt = tokens[index + 1]
        features["next.lower"] = nxt.lower()
        features["next.shape"] = _shape(nxt)
        features["next.is_price"] = bool(_PRICE_RE.match(nxt))
    else:
        features["EOS"] = True
    return features


class ItemTagger:
    """Interface for anything that labels the tokens of a receipt line."""

    available = True

    def tag(self, line: str) -> list[TaggedToken]:
        raise NotImplementedError


class NullTagger(ItemTagger):
    """Tagger used when no model is available; it never labels anything."""

    available = False

    def tag(self, line: str) -> list[TaggedToken]:
        return []


class FunctionTagger(ItemTagger):
    """Adapt a plain ``tag(line)`` callable supplied by an external model."""

    def __init__(self, func: Callable[[str], Iterable[TaggedToken]]):
        self.func = func

    def tag(self, line: str) -> list[TaggedToken]:
        return list(self.func(line))


class ModelTagger(ItemTagger):
    """Tagger backed by a trained scikit-learn pipeline."""

    def __init__(self, model: Pipeline):
        self.model = model

    def tag(self, line: str) -> list[TaggedToken]:
        tokens = tokenize(line)
        if not tokens:
            return []
        features = [token_features(tokens, i) for i in range(len(tokens))]
        labels = self.model.predict(features)
        return [
            (token, None if label == OUTSIDE else str(label))
            for token, label in zip(tokens, labels)
        ]


def as_tagger(tagger: ItemTagger | Callable[[str], Iterable[TaggedToken]] | None) -> ItemTagger:
    """Coerce ``None``, a tagger or a ``tag(line)`` callable to an :class:`ItemTagger`."""
    if tagger is None:
        return NullTagger()
    if isinstance(tagger, ItemTagger):
        return tagger
    if callable(tagger):
        return FunctionTagger(tagger)
    raise TypeError(f"expected an ItemTagger or callable, got {type(tagger).__name__}")


def fit_tagger(sequences: Iterable[Sequence[tuple[str, Optional[str]]]]) -> Pipeline:
    """Train a tagging pipeline from labelled token sequences.

    Parameters
    ----------
    sequences:
        One sequence per receipt line of ``(token, label)`` pairs. ``None``
        labels are treated as outside (``"O"``).
    """

    X: list[dict[str, object]] = []
    y: list[str] = []
    for seq in sequences:
        tokens = [str(token) for token, _ in seq]
        for i, (_, label) in enumerate(seq):
            X.append(token_features(tokens, i))
            y.append(label or OUTSIDE)

    if not X:
        raise TaggerError("training data contains no labelled tokens")
    unknown = set(y) - set(LABELS)
    if unknown:
        raise TaggerError(f"unknown labels in training data: {sorted(unknown)}")
    if len(set(y)) < 2:
        raise TaggerError("training data needs at least two distinct labels")

    pipeline: Pipeline = Pipeline(
        [
            ("vectorizer", DictVectorizer()),
            ("clf", LogisticRegression(max_iter=1000)),
        ]
    )
    pipeline.fit(X, y)
    return pipeline


def load_training_data(data_path: str | Path) -> list[list[tuple[str, str]]]:
    """Read labelled tokens from a CSV with ``line_id``, ``token`` and ``label`` columns."""

    df = pd.read_csv(data_path, dtype=str, keep_default_na=False)
    missing = [col for col in TRAINING_COLUMNS if col not in df]
    if missing:
        raise TaggerError(f"training data is missing columns: {', '.join(missing)}")

    df["label"] = df["label"].str.strip().replace("", OUTSIDE)
    df = df[df["token"].str.strip() != ""]
    return [
        list(zip(group["token"], group["label"]))
        for _, group in df.groupby("line_id", sort=False)
    ]


def train_tagger(data_path: str | Path, model_path: Path = MODEL_PATH) -> Pipeline:
    """Train a tagger from a CSV of labelled tokens and save it to ``model_path``."""

    sequences = load_training_data(data_path)
    pipeline = fit_tagger(sequences)
    joblib.dump(pipeline, model_path)
    logger.info("Trained item tagger on %d lines, saved to %s", len(sequences), model_path)
    return pipeline


def load_tagger(model_path: str | Path | None = MODEL_PATH) -> ItemTagger:
    """Return the saved tagger, or a :class:`NullTagger` if it cannot be loaded."""

    if model_path is None:
        return NullTagger()
    path = Path(model_path)
    if not path.exists():
        logger.warning("Item tagger model not found at %s; line items disabled", path)
        return NullTagger()
    try:
        model = joblib.load(path)
    except Exception as e:
        logger.warning("Could not load item tagger from %s: %s", path, e)
        return NullTagger()
    return ModelTagger(model)


if __name__ == "__main__":  # pragma: no cover - CLI helper
    import argparse

    parser = argparse.ArgumentParser(description="Train the receipt line item tagger")
    parser.add_argument("data", help="CSV with line_id, token and label columns")
    parser.add_argument(
        "--model", type=Path, default=MODEL_PATH, help="Where to store the trained model"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    train_tagger(args.data, args.model)
    print(f"Model saved to {args.model}")
