"""
Listing generator for Commerce Desk.

Expands canonical catalog rows into per-marketplace listing records. All
marketplace differences (bullet caps, discounts, fulfillment defaults,
compliance reminders, taxonomy) come from MarketplaceProfile data; the
generator itself only knows how to apply a profile to a row.

Example:
    >>> options = GenerationOptions(selected_platforms={MarketplaceKey.AMAZON})
    >>> dataset = generate_catalog_dataset(rows, options)
    >>> dataset.for_platform("amazon")[0].price.selling
    899.1
"""

import re
from typing import Iterable, Optional, Sequence

from commerce_desk.config.marketplaces import MARKETPLACE_PROFILES, MarketplaceProfile
from commerce_desk.catalog.normalizer import normalize_header
from commerce_desk.models.schemas import (
    CatalogDataset,
    CatalogListing,
    CatalogRow,
    ComplianceMode,
    FulfillmentMode,
    GenerationOptions,
    ListingPrice,
    MarketplaceKey,
)
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Text Rules
# =============================================================================

SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+|[\n|;]+")
TOKEN = re.compile(r"[^\W_]+(?:['&][^\W_]+)*", re.UNICODE)
BULLET_TRAILING_PUNCT = ".;:!"

STOP_WORDS = frozenset({
    "a", "an", "and", "at", "by", "for", "from", "in", "is", "it", "of",
    "on", "or", "the", "to", "with", "set", "pack",
})

FULFILLMENT_COLUMNS = ("fulfillment", "fulfilment", "fulfilled by", "shipping")

FULFILLED_VALUES = frozenset({
    "fulfilled", "marketplace", "fba", "fbf", "smart fulfilment",
    "smart fulfillment", "assured", "sjit", "ppmp",
})
SELF_VALUES = frozenset({
    "self", "self ship", "self shipped", "seller", "seller fulfilled",
    "merchant", "mfn", "easy ship", "easy ship prime",
})

# Order of fixed reminder text vs row warnings matters for summaries:
# warnings always follow the profile reminders.
WARNING_MISSING_BRAND = "Brand is missing; {label} only accepts listings from approved brands."
WARNING_ZERO_PRICE = "Price is missing or zero; set an MRP before publishing."
WARNING_LONG_TITLE = "Title is {length} characters; {label} allows {limit}."
WARNING_NO_DESCRIPTION = "Source description is empty; the generated copy needs review."


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


def _dedupe_casefold(items: Iterable[str]) -> list[str]:
    """Drop case-insensitive repeats, keeping first spelling and order."""
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        key = item.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def _is_fulfillment_column(header: str) -> bool:
    key = normalize_header(header)
    if key in FULFILLMENT_COLUMNS:
        return True
    return any(
        key == f"{platform.value} {column}"
        for platform in MarketplaceKey
        for column in FULFILLMENT_COLUMNS
    )


def description_sentences(description: str) -> list[str]:
    """Split a description into bullet-sized sentences."""
    sentences = []
    for part in SENTENCE_SPLIT.split(description or ""):
        cleaned = part.strip().rstrip(BULLET_TRAILING_PUNCT).strip()
        if cleaned:
            sentences.append(_capitalize(cleaned))
    return sentences


def tokenize(text: Optional[str]) -> list[str]:
    """Search-term tokens: words of 2+ characters that are not stop words."""
    return [
        token
        for token in TOKEN.findall(text or "")
        if len(token) >= 2 and token.casefold() not in STOP_WORDS
    ]


# =============================================================================
# Listing Generator
# =============================================================================

class ListingGenerator:
    """
    Applies marketplace profiles to catalog rows.

    The generator holds no state between calls; identical rows and options
    always produce identical datasets.
    """

    def __init__(self, profiles: Optional[dict[MarketplaceKey, MarketplaceProfile]] = None):
        self.profiles = profiles or MARKETPLACE_PROFILES

    def generate(self, rows: Sequence[CatalogRow], options: GenerationOptions) -> CatalogDataset:
        """
        Build a listing pack for every selected marketplace.

        Args:
            rows: Valid, normalized catalog rows.
            options: Selected marketplaces and compliance mode.

        Returns:
            CatalogDataset keyed by the selected marketplaces, one listing
            per row. Empty selection or empty rows yield an empty dataset.
        """
        platforms = self._ordered_platforms(options.selected_platforms)
        generated: dict[MarketplaceKey, list[CatalogListing]] = {}

        for platform in platforms:
            profile = self.profiles[platform]
            generated[platform] = [
                self.build_listing(row, profile, options.compliance_mode)
                for row in rows
            ]

        dataset = CatalogDataset(generated=generated)
        logger.info(
            "Listing packs generated",
            platforms=[p.value for p in platforms],
            rows=len(rows),
            listings=dataset.listing_count,
            compliance_mode=ComplianceMode(options.compliance_mode).value,
        )
        return dataset

    def _ordered_platforms(self, selected: Iterable[MarketplaceKey]) -> list[MarketplaceKey]:
        """Selected marketplaces in profile-table order."""
        wanted = {MarketplaceKey(p) for p in selected}
        unknown = wanted - set(self.profiles)
        if unknown:
            logger.warning("No profile for marketplaces", platforms=sorted(p.value for p in unknown))
        return [key for key in self.profiles if key in wanted]

    def build_listing(
        self,
        row: CatalogRow,
        profile: MarketplaceProfile,
        compliance_mode: ComplianceMode = ComplianceMode.STANDARD,
    ) -> CatalogListing:
        """Realize one row for one marketplace."""
        return CatalogListing(
            platform=profile.key,
            sku=row.sku,
            title=row.title,
            subtitle=self.build_subtitle(row),
            bullet_points=self.build_bullets(row, profile),
            description=self.build_description(row),
            search_terms=self.build_search_terms(row),
            category_path=self.map_category(row.category, profile),
            price=self.build_price(row.price, profile),
            fulfillment=self.resolve_fulfillment(row, profile),
            compliance_notes=self.build_compliance_notes(row, profile, compliance_mode),
        )

    # -------------------------------------------------------------------------
    # Field derivations
    # -------------------------------------------------------------------------

    @staticmethod
    def build_subtitle(row: CatalogRow) -> Optional[str]:
        parts = [part for part in (row.brand, row.category) if part]
        return " · ".join(parts) if parts else None

    @staticmethod
    def build_bullets(row: CatalogRow, profile: MarketplaceProfile) -> list[str]:
        """Attribute bullets first, then description sentences, capped."""
        bullets = [
            f"{_capitalize(header)}: {value}"
            for header, value in row.attributes.items()
            if value and not _is_fulfillment_column(header)
        ]
        bullets.extend(description_sentences(row.description))
        return _dedupe_casefold(bullets)[: profile.bullet_limit]

    @staticmethod
    def build_description(row: CatalogRow) -> str:
        if row.description:
            return row.description
        text = row.title
        if row.brand:
            text += f" by {row.brand}"
        if row.category:
            text += f" in {row.category}"
        return text + "."

    @staticmethod
    def build_search_terms(row: CatalogRow) -> list[str]:
        tokens = tokenize(row.title) + tokenize(row.brand) + tokenize(row.category)
        for header, value in row.attributes.items():
            if not _is_fulfillment_column(header):
                tokens.extend(tokenize(value))
        return _dedupe_casefold(tokens)

    @staticmethod
    def map_category(category: Optional[str], profile: MarketplaceProfile) -> str:
        """
        Look up the marketplace category path.

        Exact match on the normalized category first, then the first taxonomy
        key (in table order) found as a whole word in the category.
        """
        if not category:
            return profile.fallback_category_path
        key = normalize_header(category)
        if key in profile.taxonomy:
            return profile.taxonomy[key]
        for taxonomy_key, path in profile.taxonomy.items():
            if re.search(rf"\b{re.escape(taxonomy_key)}s?\b", key):
                return path
        return profile.fallback_category_path

    @staticmethod
    def build_price(price: float, profile: MarketplaceProfile) -> ListingPrice:
        mrp = round(max(price, 0.0), 2)
        selling = round(mrp * (1 - profile.discount), 2)
        selling = min(max(selling, 0.0), mrp)
        return ListingPrice(mrp=mrp, selling=selling)

    @staticmethod
    def resolve_fulfillment(row: CatalogRow, profile: MarketplaceProfile) -> FulfillmentMode:
        """Row attribute override, marketplace-specific column first."""
        by_header = {normalize_header(h): v for h, v in row.attributes.items()}
        candidates = [f"{profile.key.value} {column}" for column in FULFILLMENT_COLUMNS]
        candidates.extend(FULFILLMENT_COLUMNS)

        for column in candidates:
            value = normalize_header(by_header.get(column, ""))
            if value in FULFILLED_VALUES:
                return FulfillmentMode.FULFILLED
            if value in SELF_VALUES:
                return FulfillmentMode.SELF
        return profile.fulfillment

    @staticmethod
    def build_compliance_notes(
        row: CatalogRow,
        profile: MarketplaceProfile,
        compliance_mode: ComplianceMode,
    ) -> list[str]:
        if ComplianceMode(compliance_mode) != ComplianceMode.STRICT:
            return []
        notes = list(profile.compliance_reminders)
        notes.extend(row_warnings(row, profile))
        return notes


def row_warnings(row: CatalogRow, profile: MarketplaceProfile) -> list[str]:
    """Row-specific compliance warnings for one marketplace."""
    warnings = []
    if profile.requires_brand and not row.brand:
        warnings.append(WARNING_MISSING_BRAND.format(label=profile.label))
    if row.price <= 0:
        warnings.append(WARNING_ZERO_PRICE)
    if len(row.title) > profile.title_limit:
        warnings.append(
            WARNING_LONG_TITLE.format(
                length=len(row.title), label=profile.label, limit=profile.title_limit
            )
        )
    if not row.description:
        warnings.append(WARNING_NO_DESCRIPTION)
    return warnings


def generate_catalog_dataset(
    rows: Sequence[CatalogRow],
    options: GenerationOptions,
) -> CatalogDataset:
    """
    Convenience function for one-off listing generation.

    Args:
        rows: Valid catalog rows
        options: Marketplace selection and compliance mode

    Returns:
        CatalogDataset
    """
    return ListingGenerator().generate(rows, options)


__all__ = [
    "ListingGenerator",
    "generate_catalog_dataset",
    "row_warnings",
    "description_sentences",
    "tokenize",
]
