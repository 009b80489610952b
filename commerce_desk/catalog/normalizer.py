"""
Row normalization for catalog sheets.

Turns one raw sheet record (header -> cell text, with inconsistent casing and
whitespace) into a canonical CatalogRow. Rows without a title are rejected
by returning None; callers filter them out before listing generation.
"""

import re
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from commerce_desk.models.schemas import CatalogRow
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)


WHITESPACE = re.compile(r"\s+")
HEADER_SEPARATORS = re.compile(r"[\s_\-]+")
CURRENCY_MARKERS = re.compile(r"(₹|rs\.?|inr|\$)", re.IGNORECASE)
NUMBER = re.compile(r"\d+(?:\.\d+)?")

SKU_ALIASES = ("sku", "sku id", "seller sku", "item sku", "product id", "style id")
TITLE_ALIASES = ("title", "product title", "product name", "name", "item name")
BRAND_ALIASES = ("brand", "brand name", "manufacturer")
DESCRIPTION_ALIASES = (
    "description", "product description", "long description", "desc", "details",
)
CATEGORY_ALIASES = (
    "category", "product category", "category name", "department", "vertical",
)
# Preference order: the first parsable column wins.
PRICE_ALIASES = ("mrp", "price", "list price", "selling price", "price inr", "unit price")

KNOWN_ALIASES = frozenset(
    SKU_ALIASES + TITLE_ALIASES + BRAND_ALIASES
    + DESCRIPTION_ALIASES + CATEGORY_ALIASES + PRICE_ALIASES
)


def normalize_text(value: Any) -> str:
    """Collapse whitespace runs and trim; None becomes an empty string."""
    if value is None:
        return ""
    text = str(value).replace("\u00a0", " ")
    return WHITESPACE.sub(" ", text).strip()


def normalize_header(header: Any) -> str:
    """Canonical header key: lowercase, separators collapsed to one space."""
    text = normalize_text(header).lower()
    text = text.replace("(", " ").replace(")", " ")
    return HEADER_SEPARATORS.sub(" ", text).strip()


def parse_price(value: Any) -> Optional[float]:
    """
    Parse a price-like cell.

    Currency markers and thousands separators are ignored. Returns None when
    no non-negative number can be read.
    """
    text = normalize_text(value)
    if not text or text.lstrip().startswith("-"):
        return None
    text = CURRENCY_MARKERS.sub("", text).replace(",", "")
    match = NUMBER.search(text)
    if not match:
        return None
    return float(match.group(0))


def _first(fields: Mapping[str, str], aliases: Iterable[str]) -> str:
    for alias in aliases:
        value = fields.get(alias, "")
        if value:
            return value
    return ""


def normalize_row(raw: Mapping[str, Any]) -> Optional[CatalogRow]:
    """
    Clean one raw sheet record into a CatalogRow.

    Args:
        raw: Header -> cell mapping as read from the sheet.

    Returns:
        CatalogRow, or None when the row has no usable title.
    """
    fields: dict[str, str] = {}
    attributes: dict[str, str] = {}

    for header, value in raw.items():
        key = normalize_header(header)
        if not key:
            continue
        text = normalize_text(value)
        if key in KNOWN_ALIASES:
            # First occurrence of a duplicated header wins
            fields.setdefault(key, text)
        else:
            attributes[normalize_text(header)] = text

    price = 0.0
    for alias in PRICE_ALIASES:
        parsed = parse_price(fields.get(alias))
        if parsed is not None:
            price = parsed
            break

    try:
        return CatalogRow(
            sku=_first(fields, SKU_ALIASES),
            title=_first(fields, TITLE_ALIASES),
            brand=_first(fields, BRAND_ALIASES),
            description=_first(fields, DESCRIPTION_ALIASES),
            category=_first(fields, CATEGORY_ALIASES),
            price=price,
            attributes=attributes,
        )
    except ValidationError as e:
        logger.debug("Row rejected", error=str(e))
        return None


def ingest_rows(records: Iterable[Mapping[str, Any]]) -> list[CatalogRow]:
    """
    Normalize a batch of sheet records and keep the valid ones.

    Rows without a SKU get a position-based one (ROW-0001 for the first
    record). When a SKU repeats, only its first row is kept.
    """
    rows: list[CatalogRow] = []
    seen: set[str] = set()
    total = 0
    duplicates = 0

    for position, record in enumerate(records, start=1):
        total += 1
        row = normalize_row(record)
        if row is None:
            continue
        if not row.sku:
            row = row.model_copy(update={"sku": f"ROW-{position:04d}"})
        sku_key = row.sku.lower()
        if sku_key in seen:
            duplicates += 1
            logger.warning("Duplicate SKU dropped", sku=row.sku, position=position)
            continue
        seen.add(sku_key)
        rows.append(row)

    dropped = total - len(rows)
    if dropped:
        logger.warning(
            "Rows excluded during ingestion",
            total=total,
            kept=len(rows),
            dropped=dropped,
            duplicates=duplicates,
        )
    else:
        logger.info("Rows ingested", total=total, kept=len(rows))
    return rows


__all__ = [
    "normalize_text",
    "normalize_header",
    "parse_price",
    "normalize_row",
    "ingest_rows",
]
