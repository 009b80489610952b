"""
Catalog module for Commerce Desk.

Components:
    - normalize_row / ingest_rows: Sheet record cleanup
    - ListingGenerator: Per-marketplace listing packs
    - summarize_catalog: Human-readable digest
    - export_listing_pack: Flat CSV-ready records
"""

from commerce_desk.catalog.normalizer import (
    ingest_rows,
    normalize_header,
    normalize_row,
    normalize_text,
    parse_price,
)
from commerce_desk.catalog.generator import (
    ListingGenerator,
    generate_catalog_dataset,
    row_warnings,
)
from commerce_desk.catalog.summarizer import summarize_catalog
from commerce_desk.catalog.exporter import export_listing_pack, listing_to_export_row

__all__ = [
    # Normalizer
    "normalize_row",
    "ingest_rows",
    "normalize_header",
    "normalize_text",
    "parse_price",
    # Generator
    "ListingGenerator",
    "generate_catalog_dataset",
    "row_warnings",
    # Summary & export
    "summarize_catalog",
    "export_listing_pack",
    "listing_to_export_row",
]
