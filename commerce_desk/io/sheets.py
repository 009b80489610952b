"""
Catalog sheet I/O.

Reads operator-supplied CSV sheets into header-keyed string records and
writes generated listing packs back out as one CSV per marketplace. All
parsing and serialization goes through pandas; the rule engine only ever
sees plain mappings.
"""

from pathlib import Path
from typing import Union

import pandas as pd

from commerce_desk.catalog.exporter import export_listing_pack
from commerce_desk.models.schemas import (
    EXPORT_COLUMNS,
    CatalogDataset,
    MarketplaceKey,
)
from commerce_desk.utils.errors import SheetReadError
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def listing_pack_filename(platform: MarketplaceKey | str) -> str:
    return f"{MarketplaceKey(platform).value}-listing-pack.csv"


def read_catalog_sheet(path: PathLike) -> list[dict[str, str]]:
    """
    Read a UTF-8 CSV catalog sheet.

    Every cell is read as text and blank cells become "". Fully empty
    lines are skipped.

    Raises:
        SheetReadError: When the file is missing or is not a readable CSV.
    """
    path = Path(path)
    try:
        frame = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8",
        )
    except FileNotFoundError as e:
        raise SheetReadError(f"Catalog sheet not found: {path}", {"path": str(path)}) from e
    except pd.errors.EmptyDataError as e:
        raise SheetReadError("Catalog sheet is empty.", {"path": str(path)}) from e
    except (UnicodeDecodeError, pd.errors.ParserError) as e:
        raise SheetReadError(
            "Unable to read sheet. Upload a UTF-8 CSV.",
            {"path": str(path), "error": str(e)},
        ) from e

    records = frame.to_dict(orient="records")
    logger.info("Catalog sheet read", path=str(path), records=len(records), columns=len(frame.columns))
    return records


def write_listing_pack(
    dataset: CatalogDataset,
    platform: MarketplaceKey | str,
    output_dir: PathLike,
) -> Path:
    """
    Write one marketplace's listing pack to {platform}-listing-pack.csv.

    The file always carries the fixed export header, even when the pack
    is empty.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / listing_pack_filename(platform)

    records = export_listing_pack(dataset, platform)
    frame = pd.DataFrame(records, columns=EXPORT_COLUMNS)
    frame.to_csv(target, index=False, encoding="utf-8")

    logger.info("Listing pack written", platform=MarketplaceKey(platform).value, rows=len(records), path=str(target))
    return target


def write_all_listing_packs(dataset: CatalogDataset, output_dir: PathLike) -> list[Path]:
    """Write a pack for every marketplace present in the dataset."""
    return [write_listing_pack(dataset, platform, output_dir) for platform in dataset.platforms]


__all__ = [
    "read_catalog_sheet",
    "write_listing_pack",
    "write_all_listing_packs",
    "listing_pack_filename",
]
