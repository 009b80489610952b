"""
Listing export boundary.

Flattens listings into fixed-column records for the sheet writer.
"""

from commerce_desk.models.schemas import (
    CatalogDataset,
    CatalogListing,
    ListingExportRow,
    MarketplaceKey,
)

LIST_SEPARATOR = " | "
TERM_SEPARATOR = ", "


def listing_to_export_row(listing: CatalogListing) -> ListingExportRow:
    """Flatten one listing; list fields are joined into single cells."""
    return ListingExportRow(
        sku=listing.sku,
        title=listing.title,
        subtitle=listing.subtitle or "",
        bullet_points=LIST_SEPARATOR.join(listing.bullet_points),
        description=listing.description,
        search_terms=TERM_SEPARATOR.join(listing.search_terms),
        category_path=listing.category_path,
        mrp=listing.price.mrp,
        selling_price=listing.price.selling,
        fulfillment=listing.fulfillment.value,
        compliance_notes=LIST_SEPARATOR.join(listing.compliance_notes),
    )


def export_listing_pack(
    dataset: CatalogDataset,
    platform: MarketplaceKey | str,
) -> list[dict[str, object]]:
    """
    Export one marketplace's pack as flat records keyed by CSV column name.

    Returns an empty list when the marketplace was not generated.
    """
    return [
        listing_to_export_row(listing).model_dump(by_alias=True)
        for listing in dataset.for_platform(platform)
    ]


__all__ = ["listing_to_export_row", "export_listing_pack", "LIST_SEPARATOR", "TERM_SEPARATOR"]
