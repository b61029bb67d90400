import pytest

from receipt_extraction.totals import (
    compile_total_pattern,
    find_amount_candidates,
    find_total,
)


def test_max_candidate_wins():
    text = "Subtotal: 8.00\nTax: 0.80\nTotal: 10.50"
    assert find_total(text) == pytest.approx(10.50)


def test_total_before_subtotal():
    text = "Total: 10.50\nSubtotal: 8.00"
    assert find_total(text) == pytest.approx(10.50)


def test_comma_decimal_normalized():
    assert find_total("Total 10,50") == pytest.approx(10.50)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("TOTALE € 24,20", 24.20),
        ("Importo: 7,5", 7.5),
        ("Balance Due: $56.09", 56.09),
        ("Amount Due = 12.00", 12.00),
        ("GRAND   TOTAL 20.00", 20.00),
        ("Celkem 149,90 Kč", 149.90),
        ("Pagato 30,00", 30.00),
        ("Summe EUR 15.40", 15.40),
        ("Total 15", 15.0),
    ],
)
def test_multilingual_keywords(text, expected):
    assert find_total(text) == pytest.approx(expected)


@pytest.mark.parametrize(
    "text",
    ["", "SuperMart\nMilk 3.50\nBread 2.00", "Total items", "Thank you"],
)
def test_no_total(text):
    assert find_total(text) is None


def test_keyword_matching_is_case_insensitive():
    assert find_total("tOtAl: 3.00") == pytest.approx(3.00)


def test_custom_keywords():
    text = "Suma 12.00\nTotal 99.00"
    assert find_total(text, keywords=["suma"]) == pytest.approx(12.00)


def test_precompiled_pattern_takes_precedence():
    pattern = compile_total_pattern(["netto"])
    assert find_total("Netto 4.00\nTotal 9.00", keywords=["total"], pattern=pattern) == 4.00


def test_candidates_report_positions():
    text = "Subtotal 8.00\nTax 0.80\nTotal 8.80"
    candidates = list(find_amount_candidates(text))
    assert [c.value for c in candidates] == [pytest.approx(8.00), pytest.approx(8.80)]
    for c in candidates:
        assert text[c.start:c.end] == c.raw


@pytest.mark.parametrize(
    "text",
    [
        "Total" + " " * 5000 + "x",
        "Total" + "\n" * 5000 + "x",
        "Total:" + " " * 2500 + "EUR" + " " * 2500 + "x",
    ],
)
def test_long_blank_run_after_keyword_has_no_total(text):
    assert find_total(text) is None


def test_long_blank_run_before_amount():
    assert find_total("Total" + " " * 5000 + "12.40") == pytest.approx(12.40)


@pytest.mark.parametrize("keywords", [[], ["", "   "]])
def test_no_keywords_match_nothing(keywords):
    assert find_total("Milk 3.50\nBread 99", keywords=keywords) is None
    assert list(find_amount_candidates("Milk 3.50", compile_total_pattern(keywords))) == []
