import datetime as dt

import pytest

from receipt_extraction import ExtractedReceipt, LineItem, ReceiptExtractor, extract_receipt
from receipt_extraction.tagger import ITEM_PRICE, PRODUCT_NAME, QUANTITY, ItemTagger, NullTagger

RECEIPT_TEXT = """
*****
WED
SuperMart
Via Roma 12, Milano
Date: 15/03/2024

Milk 2 3.50
Bread 1.20
Subtotal: 8.20
IVA: 0.82
TOTALE: 9,02
"""


class LineTagger(ItemTagger):
    """Tag ``name [qty] price`` lines; everything else is left untagged."""

    def tag(self, line):
        words = line.split()
        if len(words) < 2 or not words[-1].replace(".", "").isdigit() or ":" in line:
            return []
        tags = [(w, PRODUCT_NAME) for w in words[:-1]]
        if len(words) > 2 and words[-2].isdigit():
            tags[-1] = (words[-2], QUANTITY)
        tags.append((words[-1], ITEM_PRICE))
        return tags


def test_full_receipt():
    receipt = ReceiptExtractor(tagger=LineTagger()).extract(RECEIPT_TEXT)
    assert receipt.store_name == "SuperMart"
    assert receipt.total == pytest.approx(9.02)
    assert receipt.date == dt.date(2024, 3, 15)
    assert receipt.items == [
        LineItem("Milk", 3.50, 2),
        LineItem("Bread", 1.20),
    ]


def test_synthetic_round_trip():
    text = "Corner Deli\nTotal: 42.10\n2024-06-30\n"
    receipt = extract_receipt(text)
    assert receipt.store_name == "Corner Deli"
    assert receipt.total == pytest.approx(42.10)
    assert receipt.date == dt.date(2024, 6, 30)
    assert receipt.items == []


@pytest.mark.parametrize("raw", ["", None, "\n\n  \n", b""])
def test_empty_input_gives_empty_receipt(raw):
    receipt = extract_receipt(raw)
    assert receipt == ExtractedReceipt(store_name="Unknown Store")


@pytest.mark.parametrize(
    "raw",
    ["\x00\x01 ### %%%", "Total: \nDate: 99/99/99", "€€€ 1,,2 .. //", "T" * 5000],
)
def test_noisy_input_never_raises(raw):
    receipt = extract_receipt(raw)
    assert isinstance(receipt, ExtractedReceipt)
    assert receipt.store_name


def test_bytes_input_decoded():
    receipt = extract_receipt("Caffè Nero\nTotale 4,20".encode("utf-8"))
    assert receipt.store_name == "Caffè Nero"
    assert receipt.total == pytest.approx(4.20)


def test_extract_is_idempotent():
    extractor = ReceiptExtractor(tagger=LineTagger())
    first = extractor.extract(RECEIPT_TEXT)
    second = extractor.extract(RECEIPT_TEXT)
    assert first == second
    assert first is not second
    assert first.items is not second.items


def test_missing_tagger_keeps_other_fields():
    receipt = ReceiptExtractor(tagger=NullTagger()).extract(RECEIPT_TEXT)
    assert receipt.items == []
    assert receipt.store_name == "SuperMart"
    assert receipt.total == pytest.approx(9.02)


def test_to_dict():
    receipt = ReceiptExtractor(tagger=LineTagger()).extract(RECEIPT_TEXT)
    data = receipt.to_dict()
    assert data["date"] == "2024-03-15"
    assert data["items"][0] == {"name": "Milk", "unit_price": 3.50, "quantity": 2}
    assert extract_receipt("").to_dict()["date"] is None


def test_custom_settings():
    extractor = ReceiptExtractor(
        total_keywords=["suma"],
        date_layouts=["MM/dd/yyyy"],
        noise_tokens=["TICKET"],
        store_line_limit=2,
        unknown_store="N/A",
    )
    receipt = extractor.extract("TICKET\n03/04/2024\nSuma 5.00\nTotal 50.00")
    assert receipt.store_name == "N/A"
    assert receipt.total == pytest.approx(5.00)
    assert receipt.date == dt.date(2024, 3, 4)


def test_from_config_with_missing_model(tmp_path):
    config = {"unknown_store": "Sconosciuto", "tagger_model_path": tmp_path / "none.joblib"}
    extractor = ReceiptExtractor.from_config(config)
    assert isinstance(extractor.tagger, NullTagger)
    assert extractor.extract("").store_name == "Sconosciuto"


def test_from_config_uses_given_tagger():
    tagger = LineTagger()
    extractor = ReceiptExtractor.from_config({"store_line_limit": 1}, tagger=tagger)
    assert extractor.tagger is tagger
    assert extractor.extract("WED\nShop").store_name == "Unknown Store"


def test_no_total_keywords_gives_no_total():
    receipt = ReceiptExtractor(total_keywords=[]).extract("Shop\nMilk 3.50\nBread 99")
    assert receipt.total is None
    assert receipt.store_name == "Shop"


def test_long_blank_run_never_stalls_extraction():
    receipt = extract_receipt("Total" + "\n" * 5000 + "x")
    assert receipt.total is None


def test_currency_symbols_reach_item_prices():
    def tag(line):
        if line.startswith("Chleb"):
            return [("Chleb", PRODUCT_NAME), ("zł3,50", ITEM_PRICE)]
        return []

    extractor = ReceiptExtractor(tagger=tag, total_keywords=["razem"], currency_symbols=["zł"])
    receipt = extractor.extract("Piekarnia\nChleb zł3,50\nRazem: zł3,50")
    assert receipt.items == [LineItem("Chleb", 3.50)]
    assert receipt.total == pytest.approx(3.50)
