import pytest

from commerce_desk.catalog.normalizer import (
    ingest_rows,
    normalize_header,
    normalize_row,
    normalize_text,
    parse_price,
)


@pytest.mark.parametrize("raw,expected", [
    ("  Product   Name ", "product name"),
    ("Seller_SKU", "seller sku"),
    ("Price (INR)", "price inr"),
    ("list-price", "list price"),
])
def test_normalize_header(raw, expected):
    assert normalize_header(raw) == expected


def test_normalize_text_collapses_whitespace():
    assert normalize_text("  Cotton  Kurta \n Set ") == "Cotton Kurta Set"
    assert normalize_text(None) == ""


@pytest.mark.parametrize("raw,expected", [
    ("999", 999.0),
    ("₹1,299", 1299.0),
    ("Rs. 450.50", 450.5),
    ("INR 2,000", 2000.0),
    ("$15", 15.0),
    ("", None),
    ("free", None),
    ("-20", None),
    (None, None),
])
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


def test_normalize_row_maps_aliases_and_keeps_attributes():
    row = normalize_row({
        " SKU ": " A1 ",
        "Product Title": "  Kurta   Set ",
        "Brand Name": "Anaya",
        "Product Category": "Kurta Set",
        "MRP": "999",
        "Color ": " Indigo ",
    })
    assert row.sku == "A1"
    assert row.title == "Kurta Set"
    assert row.brand == "Anaya"
    assert row.category == "Kurta Set"
    assert row.price == 999.0
    assert row.attributes == {"Color": "Indigo"}


def test_normalize_row_unparsable_price_is_zero():
    row = normalize_row({"Title": "Kurta Set", "Price": "call us"})
    assert row.price == 0.0


def test_normalize_row_prefers_mrp_over_price():
    row = normalize_row({"Title": "Kurta Set", "Price": "800", "MRP": "1000"})
    assert row.price == 1000.0


def test_normalize_row_without_title_is_rejected():
    assert normalize_row({"SKU": "A1", "Title": "   ", "Price": "10"}) is None
    assert normalize_row({"SKU": "A1"}) is None


def test_ingest_rows_filters_and_dedupes(catalog_records):
    rows = ingest_rows(catalog_records)
    assert [row.sku for row in rows] == ["KS-1001", "SR-2002"]
    assert rows[0].price == 1299.0
    assert rows[1].brand is None


def test_ingest_rows_backfills_missing_sku():
    rows = ingest_rows([
        {"Title": "First"},
        {"Title": ""},
        {"Title": "Third"},
    ])
    assert [row.sku for row in rows] == ["ROW-0001", "ROW-0003"]


def test_ingest_rows_empty_input():
    assert ingest_rows([]) == []
