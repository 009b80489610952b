"""
Catalog summarizer: a human-readable digest of a generated dataset.
"""

from commerce_desk.config.marketplaces import MARKETPLACE_PROFILES
from commerce_desk.models.schemas import CatalogDataset, CatalogListing


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _has_row_warning(listing: CatalogListing) -> bool:
    profile = MARKETPLACE_PROFILES.get(listing.platform)
    reminders = set(profile.compliance_reminders) if profile else set()
    return any(note not in reminders for note in listing.compliance_notes)


def summarize_catalog(dataset: CatalogDataset) -> str:
    """
    Describe a dataset in one paragraph.

    Returns an empty string when the dataset holds no listings.
    """
    if dataset.is_empty:
        return ""

    listings = [item for pack in dataset.generated.values() for item in pack]
    counts = ", ".join(
        f"{MARKETPLACE_PROFILES[platform].label} {len(pack)}"
        for platform, pack in dataset.generated.items()
    )
    marketplaces = len(dataset.generated)
    parts = [
        f"Generated {_plural(len(listings), 'listing')} across "
        f"{_plural(marketplaces, 'marketplace')} ({counts})."
    ]

    priced = [item.price for item in listings if item.price.mrp > 0]
    if priced:
        avg_discount = sum(p.discount_percentage for p in priced) / len(priced)
        parts.append(f"Average discount off MRP is {avg_discount:.1f}%.")

    with_notes = sum(1 for item in listings if item.compliance_notes)
    if with_notes:
        parts.append(f"Compliance reminders attached to {_plural(with_notes, 'listing')}.")

    flagged = sum(1 for item in listings if _has_row_warning(item))
    if flagged:
        verb = "carries" if flagged == 1 else "carry"
        parts.append(f"{_plural(flagged, 'listing')} {verb} row warnings that need review.")

    return " ".join(parts)


__all__ = ["summarize_catalog"]
