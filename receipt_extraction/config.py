from __future__ import annotations

from pathlib import Path
import yaml

# Default configuration values
DEFAULT_CONFIG = {
    "total_keywords": [
        "balance due",
        "amount due",
        "grand total",
        "net total",
        "totale",
        "total",
        "celkem",
        "amount",
        "importo",
        "importe",
        "pagato",
        "summe",
        "gesamt",
        "montant",
    ],
    "currency_symbols": ["$", "€", "£", "¥", "₹", "Kč", "EUR", "USD", "GBP", "CHF", "CZK"],
    "noise_tokens": [
        "DATE",
        "DATA",
        "MON",
        "TUE",
        "WED",
        "THU",
        "FRI",
        "SAT",
        "SUN",
        "MONDAY",
        "TUESDAY",
        "WEDNESDAY",
        "THURSDAY",
        "FRIDAY",
        "SATURDAY",
        "SUNDAY",
        "LUN",
        "MAR",
        "MER",
        "GIO",
        "VEN",
        "SAB",
        "DOM",
    ],
    "date_layouts": [
        "dd/MM/yyyy",
        "dd.MM.yyyy",
        "dd-MM-yyyy",
        "MM/dd/yyyy",
        "MM.dd.yyyy",
        "MM-dd-yyyy",
        "yyyy-MM-dd",
        "yyyy/MM/dd",
        "yyyy.MM.dd",
        "dd/MM/yy",
        "dd.MM.yy",
        "dd-MM-yy",
        "MM/dd/yy",
        "MM.dd.yy",
        "MM-dd-yy",
    ],
    "store_line_limit": 5,
    "unknown_store": "Unknown Store",
    "tagger_model_path": None,
}

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def load_config(path: Path = CONFIG_PATH) -> dict:
    """Load configuration from ``path`` merged with defaults."""
    data: dict | None = None
    path = Path(path)
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    cfg = {**DEFAULT_CONFIG, **(data or {})}
    # Convert known path fields to ``Path`` objects
    for key in ["tagger_model_path"]:
        if cfg.get(key) is not None:
            cfg[key] = Path(cfg[key])
    return cfg


CONFIG = load_config()
