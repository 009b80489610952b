import pytest

from commerce_desk.catalog.generator import (
    ListingGenerator,
    description_sentences,
    generate_catalog_dataset,
    row_warnings,
    tokenize,
)
from commerce_desk.catalog.normalizer import ingest_rows
from commerce_desk.config.marketplaces import AMAZON, FLIPKART, MEESHO, MYNTRA, UNCATEGORIZED_PATH
from commerce_desk.models.schemas import (
    CatalogRow,
    ComplianceMode,
    FulfillmentMode,
    GenerationOptions,
    MarketplaceKey,
)


def test_single_row_amazon_standard():
    rows = ingest_rows([{"sku": "A1", "title": "Kurta Set", "price": "999"}])
    dataset = generate_catalog_dataset(rows, GenerationOptions(selected_platforms={MarketplaceKey.AMAZON}))

    assert dataset.platforms == [MarketplaceKey.AMAZON]
    [listing] = dataset.for_platform("amazon")
    assert listing.sku == "A1"
    assert listing.price.mrp == 999.00
    assert listing.price.selling <= 999.00
    assert listing.price.selling == pytest.approx(899.1)
    assert listing.compliance_notes == []
    assert listing.fulfillment == FulfillmentMode.FULFILLED


def test_listing_count_matches_rows_for_every_platform(catalog_rows, all_platforms_strict):
    dataset = generate_catalog_dataset(catalog_rows, all_platforms_strict)
    assert dataset.platforms == [
        MarketplaceKey.AMAZON, MarketplaceKey.FLIPKART, MarketplaceKey.MEESHO, MarketplaceKey.MYNTRA,
    ]
    for platform in dataset.platforms:
        assert len(dataset.for_platform(platform)) == len(catalog_rows)


def test_prices_never_exceed_mrp(catalog_rows, all_platforms_strict):
    dataset = generate_catalog_dataset(catalog_rows, all_platforms_strict)
    for listings in dataset.generated.values():
        for listing in listings:
            assert 0 <= listing.price.selling <= listing.price.mrp


def test_generation_is_deterministic(catalog_rows, all_platforms_strict):
    first = generate_catalog_dataset(catalog_rows, all_platforms_strict)
    second = generate_catalog_dataset(catalog_rows, all_platforms_strict)
    assert first.model_dump() == second.model_dump()


def test_empty_selection_or_rows_yield_empty_dataset(catalog_rows, amazon_options):
    assert generate_catalog_dataset(catalog_rows, GenerationOptions()).is_empty
    assert generate_catalog_dataset([], amazon_options).generated == {MarketplaceKey.AMAZON: []}


def test_bullets_attributes_first_then_sentences_capped(catalog_rows):
    row = catalog_rows[0]
    amazon = ListingGenerator.build_bullets(row, AMAZON)
    assert amazon == [
        "Color: Indigo",
        "Fabric: Cotton",
        "Pure cotton kurta with palazzo",
        "Hand block printed",
        "Machine washable",
    ]
    assert len(ListingGenerator.build_bullets(row, MEESHO)) == MEESHO.bullet_limit


def test_bullets_skip_fulfillment_column():
    row = CatalogRow(sku="A1", title="Kurta", attributes={"Fulfillment": "self ship", "Size": "M"})
    assert ListingGenerator.build_bullets(row, MYNTRA) == ["Size: M"]


def test_search_terms_deduped_in_first_seen_order(catalog_rows):
    assert ListingGenerator.build_search_terms(catalog_rows[0]) == ["Cotton", "Kurta", "Anaya", "Indigo"]


def test_subtitle_from_brand_and_category():
    assert ListingGenerator.build_subtitle(CatalogRow(title="T", brand="Anaya", category="Kurta")) == "Anaya · Kurta"
    assert ListingGenerator.build_subtitle(CatalogRow(title="T", category="Kurta")) == "Kurta"
    assert ListingGenerator.build_subtitle(CatalogRow(title="T")) is None


def test_description_fallback_is_composed():
    row = CatalogRow(title="Kurta Set", brand="Anaya", category="Ethnic Wear")
    assert ListingGenerator.build_description(row) == "Kurta Set by Anaya in Ethnic Wear."


@pytest.mark.parametrize("category,profile,expected", [
    ("Kurta Set", AMAZON, "Clothing & Accessories > Women > Ethnic Wear > Kurta Sets"),
    ("Sarees", FLIPKART, "Clothing and Accessories > Sarees"),
    ("Women's Kurta", MYNTRA, "Women > Indian & Fusion Wear > Kurtas & Suits"),
    ("Garden Tools", MEESHO, UNCATEGORIZED_PATH),
    (None, AMAZON, UNCATEGORIZED_PATH),
])
def test_map_category(category, profile, expected):
    assert ListingGenerator.map_category(category, profile) == expected


def test_price_discount_and_rounding():
    price = ListingGenerator.build_price(1299.0, FLIPKART)
    assert price.mrp == 1299.0
    assert price.selling == pytest.approx(1104.15)
    assert ListingGenerator.build_price(500.0, MYNTRA).selling == 500.0
    zero = ListingGenerator.build_price(0.0, AMAZON)
    assert zero.mrp == zero.selling == 0.0


def test_fulfillment_override_from_attributes():
    generic = CatalogRow(title="T", attributes={"Fulfillment": "Self Ship"})
    assert ListingGenerator.resolve_fulfillment(generic, AMAZON) == FulfillmentMode.SELF

    specific = CatalogRow(title="T", attributes={"Fulfillment": "self", "Myntra Fulfillment": "PPMP"})
    assert ListingGenerator.resolve_fulfillment(specific, MYNTRA) == FulfillmentMode.FULFILLED
    assert ListingGenerator.resolve_fulfillment(specific, AMAZON) == FulfillmentMode.SELF

    unknown = CatalogRow(title="T", attributes={"Fulfillment": "maybe"})
    assert ListingGenerator.resolve_fulfillment(unknown, MEESHO) == FulfillmentMode.SELF


def test_strict_mode_adds_reminders_then_row_warnings(catalog_rows, all_platforms_strict):
    dataset = generate_catalog_dataset(catalog_rows, all_platforms_strict)
    saree_amazon = dataset.for_platform("amazon")[1]
    reminders = list(AMAZON.compliance_reminders)
    assert saree_amazon.compliance_notes[: len(reminders)] == reminders
    assert any("Brand is missing" in note for note in saree_amazon.compliance_notes[len(reminders):])

    # Meesho does not gate on brand
    saree_meesho = dataset.for_platform("meesho")[1]
    assert not any("Brand is missing" in note for note in saree_meesho.compliance_notes)


def test_standard_mode_has_no_notes(catalog_rows):
    options = GenerationOptions(selected_platforms=set(MarketplaceKey), compliance_mode=ComplianceMode.STANDARD)
    dataset = generate_catalog_dataset(catalog_rows, options)
    assert all(not item.compliance_notes for pack in dataset.generated.values() for item in pack)


def test_row_warnings_cover_price_title_and_description():
    row = CatalogRow(sku="A1", title="X" * 130, brand="Anaya", price=0)
    warnings = row_warnings(row, MYNTRA)
    assert any("Price is missing" in w for w in warnings)
    assert any("130 characters" in w for w in warnings)
    assert any("description is empty" in w for w in warnings)
    assert row_warnings(row, AMAZON) == [w for w in warnings if "characters" not in w]


def test_text_helpers():
    assert description_sentences("One. Two!  three | four;") == ["One", "Two", "Three", "Four"]
    assert tokenize("The Kurta & a Set for you") == ["Kurta", "you"]
